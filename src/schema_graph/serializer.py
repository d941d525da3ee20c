"""Graph serializers that encode references as identity links.

Every serializer writes each record exactly once, in composed order. A
reference property is written so that loading the artifact yields the
same object as the referenced record, never a structural copy. Self and
forward references (records admitted as cycle seeds) are patched in once
their target exists.
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from schema_graph.resolver import ResolvedGraph
from schema_graph.types import EmittedRecord, Reference

REF_KEY = "$ref"


def emitted_records(graph: ResolvedGraph, order: list[str]) -> list[EmittedRecord]:
    """Build the output contract: one EmittedRecord per name, in ``order``.

    Raises:
        ValueError: If ``order`` does not name every record exactly once.
    """
    if len(set(order)) != len(order) or sorted(order) != graph.names():
        raise ValueError("Emission order must name every record exactly once")

    result: list[EmittedRecord] = []
    for name in order:
        record = graph[name]
        properties: dict[str, str] = {}
        references: list[tuple[str, str]] = []
        for prop in sorted(record.properties):
            value = record.properties[prop]
            if isinstance(value, Reference):
                properties[prop] = value.target
                references.append((prop, value.target))
            else:
                properties[prop] = value.description
        result.append(
            EmittedRecord(
                name=name,
                properties=properties,
                enum_constants=tuple(sorted(record.enum_constants)),
                references=tuple(references),
            )
        )
    return result


class GraphSerializer(ABC):
    """Serializer contract for a resolved, ordered graph."""

    format_name: str = ""
    suffix: str = ""

    @abstractmethod
    def serialize(self, graph: ResolvedGraph, order: list[str]) -> str:
        """Return the artifact text for ``graph`` emitted in ``order``."""

    def write(self, graph: ResolvedGraph, order: list[str], path: Path | str) -> Path:
        """Serialize to ``path`` and return it."""
        path = Path(path)
        path.write_text(self.serialize(graph, order), encoding="utf-8")
        return path


class ModuleSerializer(GraphSerializer):
    """Emit a Python module that builds a ``schema`` dict of shared nodes.

    A reference to an emitted record is written as ``schema['Name']``,
    so every reference resolves to the same dict when the module runs.
    """

    format_name = "module"
    suffix = ".py"

    def __init__(self, variable: str = "schema") -> None:
        if not variable.isidentifier():
            raise ValueError(f"Not a valid variable name: {variable!r}")
        self.variable = variable

    def _ref(self, name: str) -> str:
        return f"{self.variable}[{name!r}]"

    def serialize(self, graph: ResolvedGraph, order: list[str]) -> str:
        lines = [
            '"""Schema graph generated by schema_graph."""',
            "",
            f"{self.variable} = {{}}",
            "",
        ]
        emitted: set[str] = set()
        pending: dict[str, list[tuple[str, str]]] = {}  # target -> [(record, property)]

        for rec in emitted_records(graph, order):
            refs = dict(rec.references)
            entries = []
            for prop, value in rec.properties.items():
                if prop not in refs:
                    entries.append(f"{prop!r}: {value!r}")
                elif value in emitted:
                    entries.append(f"{prop!r}: {self._ref(value)}")
                else:
                    pending.setdefault(value, []).append((rec.name, prop))

            body = []
            if rec.properties:
                body.append(f"'properties': {{{', '.join(entries)}}}")
            if rec.enum_constants:
                body.append(f"'enum': {list(rec.enum_constants)!r}")
            lines.append(f"{self._ref(rec.name)} = {{{', '.join(body)}}}")
            emitted.add(rec.name)

            for owner, prop in pending.pop(rec.name, []):
                lines.append(f"{self._ref(owner)}['properties'][{prop!r}] = {self._ref(rec.name)}")

        lines.append("")
        return "\n".join(lines)


class JsonSerializer(GraphSerializer):
    """Emit JSON with references encoded as ``{"$ref": "Name"}`` links."""

    format_name = "json"
    suffix = ".json"

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def serialize(self, graph: ResolvedGraph, order: list[str]) -> str:
        types: dict[str, dict[str, Any]] = {}
        for rec in emitted_records(graph, order):
            refs = dict(rec.references)
            body: dict[str, Any] = {}
            if rec.properties:
                body["properties"] = {
                    prop: {REF_KEY: value} if prop in refs else value
                    for prop, value in rec.properties.items()
                }
            if rec.enum_constants:
                body["enum"] = list(rec.enum_constants)
            types[rec.name] = body
        return json.dumps({"order": list(order), "types": types}, indent=self.indent) + "\n"


SERIALIZERS: dict[str, type[GraphSerializer]] = {
    ModuleSerializer.format_name: ModuleSerializer,
    JsonSerializer.format_name: JsonSerializer,
}


def get_serializer(format_name: str) -> GraphSerializer:
    """Return a serializer instance for ``format_name``."""
    cls = SERIALIZERS.get(format_name)
    if cls is None:
        raise ValueError(
            f"Unknown output format '{format_name}' (expected one of {sorted(SERIALIZERS)})"
        )
    return cls()


def load_module_graph(path: Path | str, variable: str = "schema") -> dict[str, dict[str, Any]]:
    """Import a module written by ModuleSerializer and return its schema dict.

    The module is loaded from ``path`` without being added to ``sys.modules``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Schema module not found: {path}")

    module_name = f"_schema_graph_{path.stem}"
    loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    module = importlib.util.module_from_spec(spec)
    loader.exec_module(module)
    return getattr(module, variable)


def load_json_graph(text: str) -> dict[str, dict[str, Any]]:
    """Load JSON produced by JsonSerializer, turning ``$ref`` links into shared nodes.

    Raises:
        ValueError: If a ``$ref`` names a type that is not in the document.
    """
    data = json.loads(text)
    types = data["types"]
    nodes: dict[str, dict[str, Any]] = {
        name: {} for name in [*data.get("order", []), *types]
    }

    for name, body in types.items():
        node = nodes[name]
        if "properties" in body:
            props: dict[str, Any] = {}
            for prop, value in body["properties"].items():
                if isinstance(value, dict) and REF_KEY in value:
                    target = value[REF_KEY]
                    if target not in nodes:
                        raise ValueError(f"Dangling reference '{target}' in '{name}.{prop}'")
                    props[prop] = nodes[target]
                else:
                    props[prop] = value
            node["properties"] = props
        if "enum" in body:
            node["enum"] = list(body["enum"])
    return nodes
