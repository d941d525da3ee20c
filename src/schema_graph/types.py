"""Type records, property values and fragments for the schema graph."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


_NON_WORD = re.compile(r"\W+")


def normalize_name(name: str) -> str:
    """Strip non-word characters from a scraped type name.

    Documentation headings carry decorations like ``VirtualDevice (1)``
    or ``ArrayOfString[]``; only the word characters form the name.
    """
    return _NON_WORD.sub("", name.split("(")[0].strip())


class MergePolicy(Enum):
    """Which side wins when a child and its parent define the same property."""

    CHILD_WINS = "child_wins"
    PARENT_WINS = "parent_wins"


# Mapping from config spelling to MergePolicy
MERGE_POLICY_NAMES: dict[str, MergePolicy] = {mp.value: mp for mp in MergePolicy}


@dataclass(frozen=True)
class Primitive:
    """A leaf type description (e.g. ``xsd:string``). Carries no graph edge."""

    description: str


@dataclass(frozen=True)
class Reference:
    """A property value that names another record.

    The target is looked up at serialization time; it is not owned.
    """

    target: str


PropertyValue = Union[Primitive, Reference]


@dataclass(frozen=True)
class Fragment:
    """Partial record extracted from one document.

    Fragments for the same name accumulate in the store, they never
    overwrite each other wholesale.
    """

    name: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    enum_constants: frozenset[str] = field(default_factory=frozenset)
    inherit_from: str | None = None
    source: str | None = None  # document id the fragment came from

    @property
    def reference_targets(self) -> set[str]:
        """Names of all records this fragment's properties point to."""
        return {v.target for v in self.properties.values() if isinstance(v, Reference)}


@dataclass
class TypeRecord:
    """A named type description in the graph.

    ``resolved`` becomes true once the inherited properties have been
    merged in; after that the property set does not change again.
    ``extracted`` is true once at least one fragment was merged in.
    """

    name: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    enum_constants: set[str] = field(default_factory=set)
    inherit_from: str | None = None
    resolved: bool = False
    extracted: bool = False

    @property
    def referenced_names(self) -> set[str]:
        """Record names this record depends on, excluding itself."""
        return {
            v.target
            for v in self.properties.values()
            if isinstance(v, Reference) and v.target != self.name
        }

    @property
    def references_self(self) -> bool:
        return any(
            isinstance(v, Reference) and v.target == self.name
            for v in self.properties.values()
        )

    @property
    def is_placeholder(self) -> bool:
        """True if the record was only ever created by reference."""
        return not self.extracted

    def copy(self) -> TypeRecord:
        """Return an independent copy of this record."""
        return TypeRecord(
            name=self.name,
            properties=dict(self.properties),
            enum_constants=set(self.enum_constants),
            inherit_from=self.inherit_from,
            resolved=self.resolved,
            extracted=self.extracted,
        )


@dataclass(frozen=True)
class EmittedRecord:
    """One record of the output contract, in emission order.

    ``properties`` maps property names to the primitive description or,
    for references, the target name. ``references`` lists the
    ``(property_name, target_name)`` pairs a serializer must encode as
    identity links.
    """

    name: str
    properties: dict[str, str]
    enum_constants: tuple[str, ...]
    references: tuple[tuple[str, str], ...]


# ---- Config dataclasses (parsed from .sgc) ----


@dataclass(frozen=True)
class ResolutionConfig:
    """Settings for one resolution run."""

    seed_set: frozenset[str] = field(default_factory=frozenset)  # names known to cycle
    resolver_round_cap: int = 100
    composer_round_cap: int = 100
    merge_policy: MergePolicy = MergePolicy.CHILD_WINS

    @classmethod
    def default(cls) -> ResolutionConfig:
        """No seeds, round caps of 100, child properties win."""
        return cls()

    def __post_init__(self) -> None:
        for label, cap in (
            ("resolver", self.resolver_round_cap),
            ("composer", self.composer_round_cap),
        ):
            if cap < 1:
                raise ValueError(f"{label} round cap must be positive, got {cap}")
