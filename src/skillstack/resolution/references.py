# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reference forms accepted wherever a fragment can be named.

Three historical formats name the same fragment:

* ``Alias`` - a short name declared in the relationship document
  (``react``);
* ``Canonical`` - the identifier declared by the fragment header
  (``react-framework`` or ``react-framework (@vince)``);
* ``LegacyPath`` - the composite path the fragment used to live under
  (``frontend/framework/react-framework (@vince)``).

:func:`classify_reference` is the single place that inspects the shape of a
reference string; callers branch on the returned variant instead.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final, TypeAlias

_LEGACY_SEGMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<name>[^()]+?)\s*(?:\(@(?P<author>[\w-]+)\))?$",
)


class ReferenceForm(str, Enum):
    """Enumerate the reference formats understood by the resolver."""

    ALIAS = "alias"
    CANONICAL = "canonical"
    LEGACY_PATH = "legacy-path"


@dataclass(frozen=True, slots=True)
class AliasReference:
    """Reference naming a declared alias."""

    raw: str
    target: str
    form: ClassVar[ReferenceForm] = ReferenceForm.ALIAS


@dataclass(frozen=True, slots=True)
class CanonicalReference:
    """Reference that is expected to be a canonical identifier."""

    raw: str
    form: ClassVar[ReferenceForm] = ReferenceForm.CANONICAL


@dataclass(frozen=True, slots=True)
class LegacyPathReference:
    """Reference using the ``category/subcategory/name(@author)`` layout."""

    raw: str
    directories: tuple[str, ...]
    name: str
    author: str | None
    form: ClassVar[ReferenceForm] = ReferenceForm.LEGACY_PATH

    def candidates(self) -> tuple[str, ...]:
        """Return canonical identifiers this path may correspond to, best first."""

        if self.author:
            return (f"{self.name} (@{self.author})", self.name)
        return (self.name,)


Reference: TypeAlias = AliasReference | CanonicalReference | LegacyPathReference


def classify_reference(raw: str, aliases: Mapping[str, str]) -> Reference:
    """Return the tagged variant describing ``raw``.

    Args:
        raw: Reference string exactly as written in a configuration entry.
        aliases: Alias map from the relationship declarations.

    Returns:
        Reference: Alias when ``raw`` is a declared alias, legacy path when it
        contains a ``/`` separator, canonical otherwise.
    """

    text = raw.strip()
    target = aliases.get(text)
    if target is not None:
        return AliasReference(raw=raw, target=target)
    if "/" in text:
        legacy = decompose_legacy_path(raw)
        if legacy is not None:
            return legacy
    return CanonicalReference(raw=raw)


def decompose_legacy_path(raw: str) -> LegacyPathReference | None:
    """Split ``raw`` into directories, a fragment name, and an author tag.

    Single-segment input is accepted so that ``name(@author)`` spellings
    without the canonical space also decompose.

    Args:
        raw: Reference string to decompose.

    Returns:
        LegacyPathReference | None: Decomposed reference, or ``None`` when the
        final segment does not look like a fragment name.
    """

    segments = [segment.strip() for segment in raw.strip().strip("/").split("/")]
    if not segments or any(not segment for segment in segments):
        return None
    match = _LEGACY_SEGMENT_PATTERN.match(segments[-1])
    if match is None:
        return None
    name = match.group("name").strip().lower()
    if not name:
        return None
    author = match.group("author")
    return LegacyPathReference(
        raw=raw,
        directories=tuple(segments[:-1]),
        name=name,
        author=author.lower() if author else None,
    )


__all__ = [
    "AliasReference",
    "CanonicalReference",
    "LegacyPathReference",
    "Reference",
    "ReferenceForm",
    "classify_reference",
    "decompose_legacy_path",
]
