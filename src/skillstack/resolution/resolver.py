# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable lookup tables mapping references onto catalog entries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from ..catalog.models import Catalog, FragmentMetadata
from ..errors import DeclarationError, UnresolvedReferenceError
from .references import (
    AliasReference,
    CanonicalReference,
    LegacyPathReference,
    ReferenceForm,
    classify_reference,
    decompose_legacy_path,
)


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """Outcome of resolving one reference string."""

    reference: str
    canonical_id: str
    storage_location: Path
    form: ReferenceForm


@dataclass(frozen=True, slots=True)
class ResolutionTable:
    """Alias and location lookup tables built once per run.

    The table is a pure function of the scanned catalog and the alias map. It
    is never mutated after :meth:`build` returns, so consumer pipelines share a
    single instance without locking.
    """

    catalog: Catalog
    aliases: Mapping[str, str]
    _reverse: Mapping[str, str] = field(init=False, repr=False)

    @classmethod
    def build(cls, catalog: Catalog, aliases: Mapping[str, str] | None = None) -> ResolutionTable:
        """Validate ``aliases`` against ``catalog`` and freeze both tables.

        Args:
            catalog: Catalog scanned for this run.
            aliases: Alias map in declaration order.

        Returns:
            ResolutionTable: Table ready for concurrent lookups.

        Raises:
            DeclarationError: If an alias targets an unknown identifier or
                shadows the canonical id of a different fragment.
        """

        alias_map = dict(aliases or {})
        for alias, target in alias_map.items():
            if target not in catalog:
                raise DeclarationError(f"alias '{alias}' targets unknown fragment '{target}'")
            if alias in catalog and alias != target:
                raise DeclarationError(f"alias '{alias}' shadows the canonical id of another fragment")
        return cls(catalog=catalog, aliases=MappingProxyType(alias_map))

    def __post_init__(self) -> None:
        """Derive the reverse alias table (first declared alias wins)."""

        reverse: dict[str, str] = {}
        for alias, target in self.aliases.items():
            reverse.setdefault(target, alias)
        object.__setattr__(self, "_reverse", MappingProxyType(reverse))

    def resolve(self, reference: str) -> ResolvedReference:
        """Resolve ``reference`` to a canonical identifier and storage location.

        Resolution order: alias substitution, canonical lookup, then legacy
        composite path decomposition.

        Args:
            reference: Reference string as written in configuration.

        Returns:
            ResolvedReference: Canonical identifier, location, and matched form.

        Raises:
            UnresolvedReferenceError: If no catalog entry matches.
        """

        parsed = classify_reference(reference, self.aliases)
        if isinstance(parsed, AliasReference):
            fragment = self.catalog.get(parsed.target)
            if fragment is not None:
                return self._resolved(reference, fragment, parsed.form)
        elif isinstance(parsed, CanonicalReference):
            fragment = self.catalog.get(parsed.raw.strip())
            if fragment is not None:
                return self._resolved(reference, fragment, parsed.form)

        legacy = parsed if isinstance(parsed, LegacyPathReference) else decompose_legacy_path(reference)
        if legacy is not None:
            fragment = self._resolve_legacy(legacy)
            if fragment is not None:
                return self._resolved(reference, fragment, ReferenceForm.LEGACY_PATH)
        raise UnresolvedReferenceError(reference)

    def reverse_alias(self, canonical_id: str) -> str | None:
        """Return the alias declared for ``canonical_id``, if any."""

        return self._reverse.get(canonical_id)

    def _resolve_legacy(self, legacy: LegacyPathReference) -> FragmentMetadata | None:
        exact = self.catalog.by_legacy_path(legacy.raw.strip().strip("/"))
        if exact is not None:
            return exact
        for candidate in legacy.candidates():
            fragment = self.catalog.get(candidate)
            if fragment is not None:
                return fragment
        return None

    @staticmethod
    def _resolved(reference: str, fragment: FragmentMetadata, form: ReferenceForm) -> ResolvedReference:
        return ResolvedReference(
            reference=reference,
            canonical_id=fragment.canonical_id,
            storage_location=fragment.storage_location,
            form=form,
        )


__all__ = ["ResolutionTable", "ResolvedReference"]
