"""Record store: name to TypeRecord mapping shared by all extraction workers."""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from schema_graph.errors import ConflictingInheritanceError, StoreFrozenError
from schema_graph.types import Fragment, TypeRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Owns every record for one resolution run.

    Referencing an unseen name creates a placeholder record. Upserts to
    the same name are serialized by a per-name lock; upserts to different
    names may run concurrently. After ``freeze()`` the store is read-only.
    """

    def __init__(self) -> None:
        self._records: dict[str, TypeRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()  # guards _records and _locks
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Mark the end of acquisition. Later upserts raise StoreFrozenError."""
        self._frozen = True

    def _get_or_create(self, name: str) -> TypeRecord:
        with self._lock:
            record = self._records.get(name)
            if record is None:
                record = TypeRecord(name=name)
                self._records[name] = record
                self._locks[name] = threading.Lock()
            return record

    def _name_lock(self, name: str) -> threading.Lock:
        with self._lock:
            return self._locks[name]

    def get(self, name: str) -> TypeRecord:
        """Get a record by name, creating an empty placeholder if absent.

        Raises:
            KeyError: If the store is frozen and the name is unknown.
        """
        if self._frozen:
            record = self._records.get(name)
            if record is None:
                raise KeyError(f"Type '{name}' not found")
            return record
        return self._get_or_create(name)

    def upsert(self, name: str, fragment: Fragment) -> TypeRecord:
        """Merge an extracted fragment into the record for ``name``.

        Properties and enum constants accumulate. A property already known
        takes the incoming value. Reference targets are created as
        placeholders so every referenced name exists in the store.
        """
        if self._frozen:
            raise StoreFrozenError(f"Cannot upsert '{name}': store is frozen")

        record = self._get_or_create(name)
        for target in sorted(fragment.reference_targets):
            self._get_or_create(target)

        with self._name_lock(name):
            if fragment.inherit_from is not None:
                if record.inherit_from is None:
                    record.inherit_from = fragment.inherit_from
                elif record.inherit_from != fragment.inherit_from:
                    raise ConflictingInheritanceError(
                        name, record.inherit_from, fragment.inherit_from
                    )
            record.properties.update(fragment.properties)
            record.enum_constants.update(fragment.enum_constants)
            record.extracted = True
        return record

    def upsert_fragment(self, fragment: Fragment) -> TypeRecord:
        """Upsert a fragment under its own name."""
        return self.upsert(fragment.name, fragment)

    def all(self) -> list[tuple[str, TypeRecord]]:
        """Return a snapshot of every record, sorted by name.

        The records are copies: later mutations of the store are not
        visible through a snapshot, and vice versa.
        """
        with self._lock:
            items = sorted(self._records.items())
        return [(name, record.copy()) for name, record in items]

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._records)

    def placeholders(self) -> list[str]:
        """Names that were referenced but never populated by a fragment."""
        with self._lock:
            return sorted(n for n, r in self._records.items() if r.is_placeholder)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
