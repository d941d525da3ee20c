"""Dependency ordering: emit every record after the records it references."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from schema_graph.errors import UnorderableGraphError
from schema_graph.resolver import DEFAULT_ROUND_CAP, ResolvedGraph
from schema_graph.types import TypeRecord

logger = logging.getLogger(__name__)


def _as_mapping(records: ResolvedGraph | Mapping[str, TypeRecord]) -> Mapping[str, TypeRecord]:
    if isinstance(records, ResolvedGraph):
        return records.records
    return records


class DependencyOrderComposer:
    """Round-based topological ordering with seed-set cycle breaking.

    Each round admits every record whose referenced names were all placed
    before the round started. Records that only reference themselves are
    admissible immediately. When a round admits nothing, the seed set
    (names known to sit on reference cycles) is admitted once to unblock
    the records waiting on it.
    """

    def __init__(
        self,
        seed_set: Iterable[str] = (),
        round_cap: int = DEFAULT_ROUND_CAP,
    ) -> None:
        if round_cap < 1:
            raise ValueError(f"round_cap must be positive, got {round_cap}")
        self.seed_set = frozenset(seed_set)
        self.round_cap = round_cap

    def compose(self, records: ResolvedGraph | Mapping[str, TypeRecord]) -> list[str]:
        """Return record names in a dependency-safe emission order.

        Raises:
            UnorderableGraphError: If records remain after the seeds were
                admitted and no further progress is possible, or after
                ``round_cap`` rounds.
        """
        records = _as_mapping(records)
        order: list[str] = []
        included: set[str] = set()
        seeds_admitted = False

        missing_seeds = sorted(self.seed_set.difference(records))
        if missing_seeds:
            logger.debug("Seed names not in graph: %s", missing_seeds)

        rounds = 0
        while len(included) < len(records):
            if rounds >= self.round_cap:
                raise UnorderableGraphError(set(records) - included, rounds)
            rounds += 1

            admitted = [
                name
                for name in sorted(records)
                if name not in included and records[name].referenced_names <= included
            ]

            if not admitted:
                if seeds_admitted:
                    raise UnorderableGraphError(set(records) - included, rounds)
                seeds_admitted = True
                admitted = sorted(n for n in self.seed_set if n in records and n not in included)
                logger.debug("Ordering stalled in round %d, admitting seeds: %s", rounds, admitted)
                if not admitted:
                    raise UnorderableGraphError(set(records) - included, rounds)

            order.extend(admitted)
            included.update(admitted)
            logger.debug(
                "Ordering round %d: admitted %d, %d/%d included",
                rounds, len(admitted), len(included), len(records),
            )

        return order


def is_valid_order(
    order: list[str],
    records: ResolvedGraph | Mapping[str, TypeRecord],
    exempt: Iterable[str] = (),
) -> bool:
    """Check that every record appears once and after everything it references.

    Self references are always allowed. Records named in ``exempt`` (the
    seeds admitted to break cycles) may precede their dependencies.
    """
    records = _as_mapping(records)
    return not order_violations(order, records, exempt) and sorted(order) == sorted(records)


def order_violations(
    order: list[str],
    records: ResolvedGraph | Mapping[str, TypeRecord],
    exempt: Iterable[str] = (),
) -> list[tuple[str, str]]:
    """Return ``(record, dependency)`` pairs where the record comes first."""
    records = _as_mapping(records)
    skip = set(exempt)
    position = {name: i for i, name in enumerate(order)}
    violations: list[tuple[str, str]] = []
    for name in order:
        if name in skip:
            continue
        for dep in sorted(records[name].referenced_names):
            if position.get(dep, len(order)) > position[name]:
                violations.append((name, dep))
    return violations


def forced_records(order: list[str], records: ResolvedGraph | Mapping[str, TypeRecord]) -> list[str]:
    """Records placed ahead of at least one dependency (admitted as seeds)."""
    records = _as_mapping(records)
    position = {name: i for i, name in enumerate(order)}
    return [
        name
        for name in order
        if any(position[dep] > position[name] for dep in records[name].referenced_names)
    ]
