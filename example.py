"""Example usage of the schema_graph library."""

import tempfile
from pathlib import Path

from schema_graph import (
    FragmentParser,
    ModuleSerializer,
    RecordStore,
    build_graph,
    load_module_graph,
    parse_config,
)

# Fragments as a documentation scraper would emit them, one per page
documents = {
    "DynamicData.html": "type DynamicData {}",
    "MethodFault.html": """
        type MethodFault extends DynamicData {
            faultCause: LocalizedMethodFault,
        }
    """,
    "LocalizedMethodFault.html": """
        type LocalizedMethodFault extends DynamicData {
            fault: MethodFault,
            localizedMessage: "xsd:string",
        }
    """,
    "SnapshotTree.html": """
        type VirtualMachineSnapshotTree extends DynamicData {
            name: "xsd:string",
            childSnapshotList: VirtualMachineSnapshotTree[],
        }
    """,
}

config = parse_config("seeds { LocalizedMethodFault }")

store = RecordStore()
parser = FragmentParser()
for doc, text in documents.items():
    for fragment in parser.parse(text, source=doc):
        store.upsert_fragment(fragment)

result = build_graph(store, config)
print("Emission order:", result.order)
print("Seeded ahead of a dependency:", result.forced)

with tempfile.TemporaryDirectory() as tmp:
    path = ModuleSerializer().write(result.graph, result.order, Path(tmp) / "vsphere_schema.py")
    print()
    print(path.read_text())

    schema = load_module_graph(path)
    fault = schema["LocalizedMethodFault"]
    print("fault.fault.faultCause is fault:", fault["properties"]["fault"]["properties"]["faultCause"] is fault)
