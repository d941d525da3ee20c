"""End-to-end graph build: store -> resolver -> composer."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path

from schema_graph.composer import DependencyOrderComposer, forced_records
from schema_graph.errors import MissingFragmentWarning
from schema_graph.extractor import AcquisitionReport, FragmentFileExtractor, acquire
from schema_graph.resolver import InheritanceResolver, ResolvedGraph
from schema_graph.serializer import emitted_records
from schema_graph.store import RecordStore
from schema_graph.types import EmittedRecord, ResolutionConfig

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """A resolved graph together with its emission order."""

    graph: ResolvedGraph
    order: list[str]
    placeholders: list[str] = field(default_factory=list)
    forced: list[str] = field(default_factory=list)  # seeds emitted before a dependency
    acquisition: AcquisitionReport | None = None

    def emitted(self) -> list[EmittedRecord]:
        """Return the output contract records in emission order."""
        return emitted_records(self.graph, self.order)


def build_graph(store: RecordStore, config: ResolutionConfig | None = None) -> BuildResult:
    """Resolve inheritance and compose the emission order for ``store``.

    The store is frozen first; it is not modified afterwards. Records that
    were referenced but never extracted stay in the graph as empty records
    and are reported with a MissingFragmentWarning.
    """
    if config is None:
        config = ResolutionConfig.default()
    store.freeze()

    resolver = InheritanceResolver(config.merge_policy, config.resolver_round_cap)
    graph = resolver.resolve(store)

    composer = DependencyOrderComposer(config.seed_set, config.composer_round_cap)
    order = composer.compose(graph)

    placeholders = graph.placeholders()
    if placeholders:
        logger.warning("%d referenced types have no fragment: %s", len(placeholders), placeholders)
        warnings.warn(
            f"Types referenced but never extracted: {placeholders}",
            MissingFragmentWarning,
            stacklevel=2,
        )

    forced = forced_records(order, graph)
    if forced:
        logger.debug("Seed records emitted ahead of a dependency: %s", forced)

    return BuildResult(graph=graph, order=order, placeholders=placeholders, forced=forced)


def build_from_directory(
    root: Path | str,
    config: ResolutionConfig | None = None,
    max_workers: int = 8,
) -> BuildResult:
    """Acquire every fragment file below ``root`` and build the graph."""
    store = RecordStore()
    report = acquire(store, FragmentFileExtractor(root), max_workers=max_workers, freeze=True)
    result = build_graph(store, config)
    result.acquisition = report
    return result
