# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog aggregate models produced by the fragment scanner."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from ..constants import AUTHOR_TAG_PATTERN


@dataclass(frozen=True, slots=True)
class FragmentRelations:
    """Relationship references declared inside a fragment header."""

    requires: tuple[str, ...] = ()
    conflicts_with: tuple[str, ...] = ()
    compatible_with: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FragmentMetadata:
    """Metadata describing a single catalogued fragment."""

    canonical_id: str
    display_name: str
    description: str
    storage_location: Path
    author_tag: str | None = None
    legacy_path: str = ""
    usage: str | None = None
    standalone: bool = False
    relations: FragmentRelations = field(default_factory=FragmentRelations)

    @property
    def base_name(self) -> str:
        """Return the canonical identifier without its author tag."""

        return AUTHOR_TAG_PATTERN.sub("", self.canonical_id).strip()


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable set of fragments scanned for a single run."""

    root: Path
    fragments: tuple[FragmentMetadata, ...]
    checksum: str
    _by_id: Mapping[str, FragmentMetadata] = field(init=False, repr=False)
    _by_legacy_path: Mapping[str, FragmentMetadata] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Index fragments by canonical id and legacy path."""

        by_id = {fragment.canonical_id: fragment for fragment in self.fragments}
        by_legacy = {fragment.legacy_path: fragment for fragment in self.fragments if fragment.legacy_path}
        object.__setattr__(self, "_by_id", MappingProxyType(by_id))
        object.__setattr__(self, "_by_legacy_path", MappingProxyType(by_legacy))

    def __iter__(self) -> Iterator[FragmentMetadata]:
        return iter(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    def __contains__(self, canonical_id: object) -> bool:
        return canonical_id in self._by_id

    @property
    def ids(self) -> frozenset[str]:
        """Return every canonical identifier in the catalog."""

        return frozenset(self._by_id)

    def get(self, canonical_id: str) -> FragmentMetadata | None:
        """Return the fragment registered under ``canonical_id`` if any."""

        return self._by_id.get(canonical_id)

    def by_legacy_path(self, legacy_path: str) -> FragmentMetadata | None:
        """Return the fragment stored under ``legacy_path`` if any."""

        return self._by_legacy_path.get(legacy_path)


def derive_display_name(canonical_id: str) -> str:
    """Return a title-cased display name derived from ``canonical_id``.

    Args:
        canonical_id: Identifier such as ``react-framework (@vince)``.

    Returns:
        str: Display name such as ``React Framework``.
    """

    tail = canonical_id.rsplit("/", 1)[-1]
    bare = AUTHOR_TAG_PATTERN.sub("", tail).strip()
    return " ".join(word[:1].upper() + word[1:] for word in bare.split("-") if word)


__all__ = [
    "Catalog",
    "FragmentMetadata",
    "FragmentRelations",
    "derive_display_name",
]
