# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Relationship rules and the outcomes produced by validating a selection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class RelationshipKind(str, Enum):
    """Enumerate the relationship kinds understood by the validator."""

    CONFLICT = "conflict"
    REQUIRES = "requires"
    RECOMMENDS = "recommends"
    ALTERNATIVE = "alternative"
    DISCOURAGES = "discourages"


class Cardinality(str, Enum):
    """Enumerate how many targets of a ``requires`` rule must be selected."""

    ALL = "all"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class RelationshipRule:
    """Directed rule connecting subject fragments to target fragments.

    ``symmetric`` marks rules declared as a single group (``skills: [...]``)
    where every member relates to every other member.
    """

    kind: RelationshipKind
    subjects: frozenset[str]
    targets: frozenset[str]
    cardinality: Cardinality = Cardinality.ALL
    reason: str = ""
    source: str = ""
    symmetric: bool = False


@dataclass(frozen=True, slots=True)
class Declarations:
    """Alias map and relationship rules loaded for one run."""

    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    rules: tuple[RelationshipRule, ...] = ()


@dataclass(frozen=True, slots=True)
class Advisory:
    """Non-blocking note produced by ``recommends`` and ``discourages`` rules."""

    kind: RelationshipKind
    subject: str
    targets: tuple[str, ...]
    reason: str = ""

    @property
    def message(self) -> str:
        """Return a human-readable rendering of the advisory."""

        verb = "recommends" if self.kind is RelationshipKind.RECOMMENDS else "discourages"
        text = f"{self.subject} {verb} {', '.join(self.targets)}"
        return f"{text}: {self.reason}" if self.reason else text


@dataclass(frozen=True, slots=True)
class Suggestion:
    """Alternative fragments available for a selected fragment."""

    subject: str
    alternatives: tuple[str, ...]
    purpose: str = ""

    @property
    def message(self) -> str:
        """Return a human-readable rendering of the suggestion."""

        text = f"{self.subject} has alternatives {', '.join(self.alternatives)}"
        return f"{text} ({self.purpose})" if self.purpose else text


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Advisories and suggestions collected for an accepted selection."""

    advisories: tuple[Advisory, ...] = ()
    suggestions: tuple[Suggestion, ...] = ()


__all__ = [
    "Advisory",
    "Cardinality",
    "Declarations",
    "RelationshipKind",
    "RelationshipRule",
    "Suggestion",
    "ValidationOutcome",
]
