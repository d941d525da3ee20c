"""Inheritance resolution: flatten single-inheritance chains into each record."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, Mapping

from schema_graph.errors import UnresolvedInheritanceError
from schema_graph.store import RecordStore
from schema_graph.types import MergePolicy, TypeRecord

logger = logging.getLogger(__name__)

DEFAULT_ROUND_CAP = 100


class ResolvedGraph:
    """Read-only view of the records produced by the resolver."""

    def __init__(self, records: dict[str, TypeRecord]) -> None:
        self._records = records
        self.records: Mapping[str, TypeRecord] = MappingProxyType(records)

    def __getitem__(self, name: str) -> TypeRecord:
        return self._records[name]

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def names(self) -> list[str]:
        return sorted(self._records)

    def items(self) -> list[tuple[str, TypeRecord]]:
        return [(name, self._records[name]) for name in self.names()]

    def placeholders(self) -> list[str]:
        return [name for name, record in self.items() if record.is_placeholder]


def merge_parent(
    child: TypeRecord, parent: TypeRecord, policy: MergePolicy = MergePolicy.CHILD_WINS
) -> None:
    """Merge a resolved parent's properties and enum constants into ``child``.

    When both define a property, ``policy`` picks the winner:
    CHILD_WINS keeps the child's value, PARENT_WINS overwrites it with the
    parent's. Enum constants are always unioned. The child is marked
    resolved; merging an already resolved record does nothing.
    """
    if child.resolved:
        return
    if policy is MergePolicy.CHILD_WINS:
        merged = dict(parent.properties)
        merged.update(child.properties)
    else:
        merged = dict(child.properties)
        merged.update(parent.properties)
    child.properties = merged
    child.enum_constants |= parent.enum_constants
    child.resolved = True


class InheritanceResolver:
    """Iterative fixed-point resolver for single inheritance.

    Round 0 marks every record without a parent as resolved. Each later
    round resolves every record whose parent was resolved when the round
    started. A round that resolves nothing, or running past ``round_cap``
    rounds, raises UnresolvedInheritanceError naming the stuck records.
    """

    def __init__(
        self,
        policy: MergePolicy = MergePolicy.CHILD_WINS,
        round_cap: int = DEFAULT_ROUND_CAP,
    ) -> None:
        if round_cap < 1:
            raise ValueError(f"round_cap must be positive, got {round_cap}")
        self.policy = policy
        self.round_cap = round_cap

    def resolve(self, source: RecordStore | Mapping[str, TypeRecord]) -> ResolvedGraph:
        """Resolve a snapshot of ``source`` and return the flattened graph.

        The store itself is not modified.
        """
        if isinstance(source, RecordStore):
            records = dict(source.all())
        else:
            records = {name: record.copy() for name, record in sorted(source.items())}

        resolved: set[str] = set()
        for name, record in records.items():
            if record.inherit_from is None:
                record.resolved = True
            if record.resolved:
                resolved.add(name)

        rounds = 0
        while len(resolved) < len(records):
            if rounds >= self.round_cap:
                raise UnresolvedInheritanceError(set(records) - resolved, rounds)
            rounds += 1

            # Parents must be resolved before the round starts
            ready = [
                name
                for name in sorted(records)
                if name not in resolved and records[name].inherit_from in resolved
            ]
            logger.debug(
                "Inheritance round %d: %d ready, %d/%d resolved",
                rounds, len(ready), len(resolved), len(records),
            )
            if not ready:
                raise UnresolvedInheritanceError(set(records) - resolved, rounds)

            for name in ready:
                record = records[name]
                merge_parent(record, records[record.inherit_from], self.policy)
            resolved.update(ready)

        logger.debug("Resolved %d records in %d rounds", len(records), rounds)
        return ResolvedGraph(records)
