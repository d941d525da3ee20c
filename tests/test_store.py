"""Tests for the record store."""

import threading

import pytest

from schema_graph.errors import ConflictingInheritanceError, StoreFrozenError
from schema_graph.store import RecordStore
from schema_graph.types import Fragment, Primitive, Reference, TypeRecord


@pytest.fixture
def store():
    return RecordStore()


class TestGet:
    def test_get_creates_placeholder(self, store):
        record = store.get("Unknown")

        assert isinstance(record, TypeRecord)
        assert record.name == "Unknown"
        assert record.properties == {}
        assert record.inherit_from is None
        assert record.is_placeholder
        assert "Unknown" in store

    def test_get_returns_same_record(self, store):
        assert store.get("A") is store.get("A")
        assert len(store) == 1

    def test_frozen_get_does_not_create(self, store):
        store.get("A")
        store.freeze()

        assert store.get("A").name == "A"
        with pytest.raises(KeyError):
            store.get("B")


class TestUpsert:
    def test_upsert_populates_placeholder(self, store):
        placeholder = store.get("A")

        store.upsert("A", Fragment("A", {"x": Primitive("xsd:int")}))

        assert placeholder.properties == {"x": Primitive("xsd:int")}
        assert not placeholder.is_placeholder

    def test_fragments_accumulate(self, store):
        store.upsert("A", Fragment("A", {"x": Primitive("xsd:int")}))
        store.upsert("A", Fragment("A", enum_constants=frozenset({"on"}), inherit_from="Base"))
        store.upsert("A", Fragment("A", {"y": Primitive("xsd:string")}, enum_constants=frozenset({"off"})))

        record = store.get("A")
        assert set(record.properties) == {"x", "y"}
        assert record.enum_constants == {"on", "off"}
        assert record.inherit_from == "Base"

    def test_later_property_value_replaces(self, store):
        store.upsert("A", Fragment("A", {"x": Primitive("xsd:int")}))
        store.upsert("A", Fragment("A", {"x": Primitive("xsd:long")}))

        assert store.get("A").properties["x"] == Primitive("xsd:long")

    def test_reference_targets_vivified(self, store):
        store.upsert("A", Fragment("A", {"b": Reference("B"), "c": Reference("C")}))

        assert store.names() == ["A", "B", "C"]
        assert store.placeholders() == ["B", "C"]

    def test_parent_is_not_vivified(self, store):
        store.upsert("A", Fragment("A", inherit_from="Parent"))

        assert "Parent" not in store

    def test_conflicting_parent(self, store):
        store.upsert("A", Fragment("A", inherit_from="P1"))

        with pytest.raises(ConflictingInheritanceError):
            store.upsert("A", Fragment("A", inherit_from="P2"))

    def test_same_parent_twice_is_fine(self, store):
        store.upsert("A", Fragment("A", inherit_from="P"))
        store.upsert("A", Fragment("A", inherit_from="P"))

        assert store.get("A").inherit_from == "P"

    def test_upsert_after_freeze(self, store):
        store.freeze()

        with pytest.raises(StoreFrozenError):
            store.upsert("A", Fragment("A"))

    def test_concurrent_upserts_to_one_name(self, store):
        """Every property from every thread survives."""

        def worker(i: int) -> None:
            for j in range(50):
                store.upsert("Shared", Fragment("Shared", {f"p{i}_{j}": Primitive("xsd:int")}))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.get("Shared").properties) == 8 * 50


class TestSnapshot:
    def test_all_is_sorted(self, store):
        store.get("B")
        store.get("A")

        assert [name for name, _ in store.all()] == ["A", "B"]

    def test_snapshot_does_not_see_later_mutations(self, store):
        store.upsert("A", Fragment("A", {"x": Primitive("xsd:int")}))
        snapshot = dict(store.all())

        store.upsert("A", Fragment("A", {"y": Primitive("xsd:int")}))
        store.get("B")

        assert set(snapshot["A"].properties) == {"x"}
        assert "B" not in snapshot

    def test_snapshot_mutation_does_not_leak(self, store):
        store.upsert("A", Fragment("A", {"x": Primitive("xsd:int")}))
        snapshot = dict(store.all())

        snapshot["A"].properties["z"] = Primitive("xsd:int")

        assert set(store.get("A").properties) == {"x"}
