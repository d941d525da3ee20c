"""Tests for dependency ordering and cycle breaking."""

import pytest

from schema_graph.composer import (
    DependencyOrderComposer,
    forced_records,
    is_valid_order,
    order_violations,
)
from schema_graph.errors import UnorderableGraphError
from schema_graph.resolver import InheritanceResolver
from schema_graph.store import RecordStore
from schema_graph.types import Fragment, Primitive, Reference, TypeRecord


def _records(**refs: list[str]) -> dict[str, TypeRecord]:
    """Build records where each keyword names the records it references."""
    return {
        name: TypeRecord(name, {f"p_{target}": Reference(target) for target in targets})
        for name, targets in refs.items()
    }


class TestDependencyOrderComposer:
    """Tests for the round-based composer."""

    def test_reference_after_target(self):
        """A{x}, B{y: A} orders as [A, B]."""
        store = RecordStore()
        store.upsert_fragment(Fragment("A", {"x": Primitive("xsd:string")}))
        store.upsert_fragment(Fragment("B", {"y": Reference("A")}, inherit_from="A"))
        graph = InheritanceResolver().resolve(store)

        order = DependencyOrderComposer().compose(graph)

        assert order == ["A", "B"]

    def test_rounds_are_sorted_by_name(self):
        records = _records(C=[], A=[], B=["C"], D=["A", "B"])

        order = DependencyOrderComposer().compose(records)

        assert order == ["A", "C", "B", "D"]

    def test_order_is_valid_for_acyclic_graph(self):
        records = _records(
            Root=[], Mid1=["Root"], Mid2=["Root", "Mid1"], Leaf=["Mid2", "Mid1"], Other=["Leaf"]
        )

        order = DependencyOrderComposer().compose(records)

        assert is_valid_order(order, records)
        assert order_violations(order, records) == []

    def test_self_reference_admissible_in_first_round(self):
        records = _records(Tree=["Tree"])

        order = DependencyOrderComposer().compose(records)

        assert order == ["Tree"]

    def test_self_reference_with_dependency(self):
        records = _records(Node=["Node", "Leaf"], Leaf=[])

        order = DependencyOrderComposer().compose(records)

        assert order == ["Leaf", "Node"]

    def test_seed_breaks_cycle(self):
        """X{n: Y}, Y{m: X} with seed {X} orders as [X, Y]."""
        records = _records(X=["Y"], Y=["X"])

        order = DependencyOrderComposer(seed_set={"X"}).compose(records)

        assert order == ["X", "Y"]
        assert forced_records(order, records) == ["X"]
        assert is_valid_order(order, records, exempt={"X"})
        assert not is_valid_order(order, records)

    def test_seed_unblocks_waiting_records(self):
        records = _records(
            Fault=["Cause"], Cause=["Fault"], Wrapper=["Fault"], Plain=[]
        )

        order = DependencyOrderComposer(seed_set={"Fault"}).compose(records)

        assert order == ["Plain", "Fault", "Cause", "Wrapper"]

    def test_multiple_cycles_covered(self):
        records = _records(
            A=["B"], B=["A"],
            C=["D"], D=["E"], E=["C"],
            F=["A", "C"],
        )

        order = DependencyOrderComposer(seed_set={"A", "C"}).compose(records)

        assert sorted(order) == sorted(records)
        assert is_valid_order(order, records, exempt={"A", "C"})

    def test_no_seed_raises(self):
        records = _records(X=["Y"], Y=["X"], Z=[])

        with pytest.raises(UnorderableGraphError) as exc_info:
            DependencyOrderComposer().compose(records)

        assert exc_info.value.names == ["X", "Y"]

    def test_uncovered_cycle_raises(self):
        records = _records(A=["B"], B=["A"], C=["D"], D=["C"])

        with pytest.raises(UnorderableGraphError) as exc_info:
            DependencyOrderComposer(seed_set={"A"}).compose(records)

        assert exc_info.value.names == ["C", "D"]

    def test_seeds_missing_from_graph_ignored(self):
        records = _records(A=[], B=["A"])

        order = DependencyOrderComposer(seed_set={"NotThere"}).compose(records)

        assert order == ["A", "B"]

    def test_round_cap(self):
        records = _records(A=[], B=["A"], C=["B"], D=["C"])

        with pytest.raises(UnorderableGraphError) as exc_info:
            DependencyOrderComposer(round_cap=2).compose(records)

        assert exc_info.value.names == ["C", "D"]

    def test_empty_graph(self):
        assert DependencyOrderComposer().compose({}) == []

    def test_references_to_placeholders(self):
        store = RecordStore()
        store.upsert_fragment(Fragment("A", {"u": Reference("Undocumented")}))
        graph = InheritanceResolver().resolve(store)

        order = DependencyOrderComposer().compose(graph)

        assert order == ["Undocumented", "A"]


class TestOrderValidity:
    """Tests for the order checks."""

    def test_violation_reported(self):
        records = _records(A=[], B=["A"])

        assert order_violations(["B", "A"], records) == [("B", "A")]

    def test_missing_record_is_invalid(self):
        records = _records(A=[], B=["A"])

        assert not is_valid_order(["A"], records)
