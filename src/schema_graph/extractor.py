"""Document acquisition: run extractors concurrently and feed the record store."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Protocol

from schema_graph.parsing.fragment_parser import FragmentParser
from schema_graph.store import RecordStore
from schema_graph.types import Fragment

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "*.sgf"


class Extractor(Protocol):
    """Source of fragments, read one document at a time."""

    def list_documents(self) -> list[str]:
        """Return the ids of every document this extractor can read."""
        ...

    def extract(self, document_id: str) -> list[Fragment]:
        """Return the fragments extracted from one document, in document order.

        A document usually describes one type, but may also carry the
        enums or nested types declared on the same page. An empty list
        means the document held nothing.
        """
        ...


class FragmentFileExtractor:
    """Reads fragment files below a directory, one file per document."""

    def __init__(self, root: Path | str, pattern: str = DEFAULT_PATTERN) -> None:
        self.root = Path(root)
        self.pattern = pattern
        self._local = threading.local()

    def _parser(self) -> FragmentParser:
        # FragmentParser is not thread-safe, each worker thread gets its own
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = FragmentParser()
            self._local.parser = parser
        return parser

    def list_documents(self) -> list[str]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Fragment directory not found: {self.root}")
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob(self.pattern))

    def extract(self, document_id: str) -> list[Fragment]:
        text = (self.root / document_id).read_text(encoding="utf-8")
        return self._parser().parse(text, source=document_id)


@dataclass
class AcquisitionReport:
    """Outcome of one acquisition run."""

    documents: int = 0
    fragments: int = 0
    empty: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # document id -> error message

    @property
    def ok(self) -> bool:
        return not self.failed


def acquire(
    store: RecordStore,
    extractor: Extractor,
    document_ids: Iterable[str] | None = None,
    max_workers: int = 8,
    freeze: bool = False,
) -> AcquisitionReport:
    """Extract documents concurrently and upsert each fragment into ``store``.

    Every fragment of a document is upserted on its own, so records
    declared side by side in one document all reach the store. Extraction
    failures (unreadable or unparsable documents) are recorded in the
    report and do not stop the run; nothing from a failed document is
    upserted. Store errors such as ConflictingInheritanceError propagate.
    """
    if document_ids is None:
        document_ids = extractor.list_documents()
    document_ids = list(document_ids)
    report = AcquisitionReport(documents=len(document_ids))

    def work(document_id: str) -> tuple[str, int, str | None]:
        try:
            fragments = list(extractor.extract(document_id))
        except (OSError, SyntaxError, ValueError) as e:
            return document_id, 0, f"{type(e).__name__}: {e}"
        for fragment in fragments:
            store.upsert(fragment.name, fragment)
        return document_id, len(fragments), None

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        for document_id, count, error in pool.map(work, document_ids):
            if error is not None:
                logger.warning("Failed to extract %s: %s", document_id, error)
                report.failed[document_id] = error
            elif count == 0:
                report.empty.append(document_id)
            else:
                report.fragments += count

    logger.info(
        "Acquired %d fragments from %d documents (%d empty, %d failed), %d records",
        report.fragments, report.documents, len(report.empty), len(report.failed), len(store),
    )
    if freeze:
        store.freeze()
    return report
