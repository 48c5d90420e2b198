# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Consumer definitions, stack selections, and their merged form."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from ..resolution.references import ReferenceForm


@dataclass(frozen=True, slots=True)
class Section:
    """Named block of prose belonging to a consumer definition."""

    name: str
    body: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class ConsumerDefinition:
    """Role definition stored in the global consumer registry."""

    name: str
    title: str
    description: str
    execution_model: str | None = None
    allowed_capabilities: tuple[str, ...] = ()
    sections: tuple[Section, ...] = ()


class ReplaceableField(str, Enum):
    """List fields an override may replace instead of union."""

    ALLOWED_CAPABILITIES = "allowed_capabilities"
    SECTIONS = "sections"


@dataclass(frozen=True, slots=True)
class ConsumerOverrides:
    """Per-stack overrides applied on top of a registry definition."""

    title: str | None = None
    description: str | None = None
    execution_model: str | None = None
    allowed_capabilities: tuple[str, ...] = ()
    sections: tuple[Section, ...] = ()


@dataclass(frozen=True, slots=True)
class FragmentRef:
    """Fragment reference listed by a stack selection."""

    reference: str
    inline: bool = False


@dataclass(frozen=True, slots=True)
class StackSelection:
    """Stack-scoped choice of fragments and overrides for one consumer."""

    consumer_name: str
    fragment_refs: tuple[FragmentRef, ...] = ()
    overrides: ConsumerOverrides = field(default_factory=ConsumerOverrides)
    replace: frozenset[ReplaceableField] = frozenset()


@dataclass(frozen=True, slots=True)
class StackDocument:
    """Parsed stack document listing its consumer selections in order."""

    name: str
    source: Path
    selections: tuple[StackSelection, ...]
    description: str | None = None
    _by_name: Mapping[str, StackSelection] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Index selections by consumer name."""

        object.__setattr__(
            self,
            "_by_name",
            MappingProxyType({selection.consumer_name: selection for selection in self.selections}),
        )

    @property
    def consumer_names(self) -> tuple[str, ...]:
        """Return consumer names in stack-declared order."""

        return tuple(selection.consumer_name for selection in self.selections)

    def selection(self, consumer_name: str) -> StackSelection | None:
        """Return the selection for ``consumer_name`` if the stack lists it."""

        return self._by_name.get(consumer_name)


@dataclass(frozen=True, slots=True)
class ResolvedFragment:
    """Fragment reference after resolution against the catalog."""

    reference: str
    canonical_id: str
    storage_location: Path
    inline: bool
    form: ReferenceForm


@dataclass(frozen=True, slots=True)
class ResolvedConsumer:
    """Merged consumer definition with its resolved fragments."""

    definition: ConsumerDefinition
    inline_fragments: tuple[ResolvedFragment, ...] = ()
    referenced_fragments: tuple[ResolvedFragment, ...] = ()

    @property
    def name(self) -> str:
        """Return the consumer name."""

        return self.definition.name

    @property
    def fragments(self) -> tuple[ResolvedFragment, ...]:
        """Return inline fragments followed by referenced fragments."""

        return (*self.inline_fragments, *self.referenced_fragments)

    def selection(self) -> dict[str, str]:
        """Return canonical id to stack reference for every fragment."""

        return {fragment.canonical_id: fragment.reference for fragment in self.fragments}


@dataclass(frozen=True, slots=True)
class CompiledDocument:
    """Final text produced for one consumer."""

    consumer_name: str
    text: str


__all__ = [
    "CompiledDocument",
    "ConsumerDefinition",
    "ConsumerOverrides",
    "FragmentRef",
    "ReplaceableField",
    "ResolvedConsumer",
    "ResolvedFragment",
    "Section",
    "StackDocument",
    "StackSelection",
]
