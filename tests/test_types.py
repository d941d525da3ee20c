"""Tests for records, property values and config dataclasses."""

import pytest

from schema_graph.types import (
    Fragment,
    MergePolicy,
    Primitive,
    Reference,
    ResolutionConfig,
    TypeRecord,
    normalize_name,
)


class TestTypeRecord:
    def test_referenced_names_skip_primitives(self):
        record = TypeRecord("A", {"x": Primitive("xsd:string"), "b": Reference("B")})

        assert record.referenced_names == {"B"}

    def test_referenced_names_exclude_self(self):
        record = TypeRecord("Tree", {"children": Reference("Tree"), "info": Reference("Info")})

        assert record.referenced_names == {"Info"}
        assert record.references_self

    def test_copy_is_independent(self):
        record = TypeRecord("A", {"x": Primitive("xsd:int")}, {"on"}, extracted=True)
        clone = record.copy()

        clone.properties["y"] = Primitive("xsd:int")
        clone.enum_constants.add("off")

        assert record.properties == {"x": Primitive("xsd:int")}
        assert record.enum_constants == {"on"}
        assert clone.extracted

    def test_placeholder(self):
        assert TypeRecord("A").is_placeholder
        assert not TypeRecord("A", extracted=True).is_placeholder


class TestFragment:
    def test_reference_targets(self):
        fragment = Fragment(
            "A", {"x": Primitive("xsd:int"), "b": Reference("B"), "b2": Reference("B")}
        )

        assert fragment.reference_targets == {"B"}


class TestNormalizeName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("VirtualMachineSnapshotTree", "VirtualMachineSnapshotTree"),
            ("  HostSystem (vim.HostSystem) ", "HostSystem"),
            ("ArrayOfString[]", "ArrayOfString"),
            ("Managed-Object", "ManagedObject"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_name(raw) == expected


class TestResolutionConfig:
    def test_defaults(self):
        config = ResolutionConfig()

        assert config.seed_set == frozenset()
        assert config.resolver_round_cap == 100
        assert config.composer_round_cap == 100
        assert config.merge_policy is MergePolicy.CHILD_WINS

    def test_default_constructor(self):
        config = ResolutionConfig.default()

        assert config == ResolutionConfig()
        assert config.merge_policy is MergePolicy.CHILD_WINS

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            ResolutionConfig(composer_round_cap=0)
