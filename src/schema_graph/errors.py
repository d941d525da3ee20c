"""Exceptions and warnings raised while building a schema graph."""

from __future__ import annotations

from typing import Iterable


class SchemaGraphError(Exception):
    """Base class for schema graph errors."""


class UnresolvedInheritanceError(SchemaGraphError):
    """Records whose parent chain never resolved within the round cap.

    Raised for missing, misspelled, or cyclic parent names.

    Attributes:
        names: Sorted names of the unresolved records.
        rounds: Rounds run before giving up. A round that resolves nothing
            fails at once, so this counts rounds up to the stall and is
            only equal to the round cap when the cap was reached.
    """

    def __init__(self, names: Iterable[str], rounds: int) -> None:
        self.names = sorted(names)
        self.rounds = rounds
        super().__init__(
            f"Cannot resolve inheritance after {rounds} rounds: {self.names}"
        )


class UnorderableGraphError(SchemaGraphError):
    """Records that could not be ordered even after seed admission.

    Usually means a reference cycle that the seed set does not cover.

    Attributes:
        names: Sorted names of the records left unordered.
        rounds: Rounds run before giving up, counted up to the stall that
            followed seed admission, or up to the round cap.
    """

    def __init__(self, names: Iterable[str], rounds: int) -> None:
        self.names = sorted(names)
        self.rounds = rounds
        super().__init__(
            f"Cannot order records after {rounds} rounds "
            f"(extend the seed set to cover their cycle): {self.names}"
        )


class ConflictingInheritanceError(SchemaGraphError):
    """Two fragments for the same record name different parents."""

    def __init__(self, name: str, existing: str, incoming: str) -> None:
        self.name = name
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"Type '{name}' inherits from '{existing}', cannot also inherit from '{incoming}'"
        )


class StoreFrozenError(SchemaGraphError):
    """The record store was modified after acquisition finished."""


class MissingFragmentWarning(UserWarning):
    """A referenced type was never populated by any fragment."""
