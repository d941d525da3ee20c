"""Schema Graph - resolve scraped type descriptions into an ordered type graph."""

from schema_graph.composer import DependencyOrderComposer, is_valid_order
from schema_graph.config import load_config, parse_config, vsphere_config
from schema_graph.errors import (
    ConflictingInheritanceError,
    MissingFragmentWarning,
    SchemaGraphError,
    StoreFrozenError,
    UnorderableGraphError,
    UnresolvedInheritanceError,
)
from schema_graph.extractor import FragmentFileExtractor, acquire
from schema_graph.parsing import FragmentParser
from schema_graph.pipeline import BuildResult, build_from_directory, build_graph
from schema_graph.resolver import InheritanceResolver, ResolvedGraph, merge_parent
from schema_graph.serializer import (
    GraphSerializer,
    JsonSerializer,
    ModuleSerializer,
    load_json_graph,
    load_module_graph,
)
from schema_graph.store import RecordStore
from schema_graph.types import (
    EmittedRecord,
    Fragment,
    MergePolicy,
    Primitive,
    Reference,
    ResolutionConfig,
    TypeRecord,
)

__all__ = [
    # Main API
    "build_graph",
    "build_from_directory",
    "BuildResult",
    "RecordStore",
    "InheritanceResolver",
    "ResolvedGraph",
    "merge_parent",
    "DependencyOrderComposer",
    "is_valid_order",
    # Extraction
    "FragmentFileExtractor",
    "FragmentParser",
    "acquire",
    # Serialization
    "GraphSerializer",
    "ModuleSerializer",
    "JsonSerializer",
    "load_module_graph",
    "load_json_graph",
    # Config
    "ResolutionConfig",
    "load_config",
    "parse_config",
    "vsphere_config",
    # Types
    "TypeRecord",
    "Fragment",
    "Primitive",
    "Reference",
    "MergePolicy",
    "EmittedRecord",
    # Errors
    "SchemaGraphError",
    "UnresolvedInheritanceError",
    "UnorderableGraphError",
    "ConflictingInheritanceError",
    "StoreFrozenError",
    "MissingFragmentWarning",
]

__version__ = "0.1.0"
