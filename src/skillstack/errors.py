# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception taxonomy shared by the catalog, resolver, and compiler layers."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .relationships.models import Cardinality


class SkillstackError(RuntimeError):
    """Base class for every error raised by skillstack."""


class ConfigError(SkillstackError):
    """Raised when configuration input is invalid."""


# --------------------------------------------------------------------------- run-fatal


class CatalogError(SkillstackError):
    """Raised when catalog or declaration integrity is violated.

    Catalog errors abort the entire run before any consumer pipeline starts.
    """


class DuplicateIdError(CatalogError):
    """Raised when two fragment files declare the same canonical identifier."""

    def __init__(self, canonical_id: str, first: Path, second: Path) -> None:
        """Create the error for ``canonical_id`` declared at two locations.

        Args:
            canonical_id: Identifier declared twice.
            first: Location that declared the identifier first.
            second: Location that declared the identifier again.
        """

        super().__init__(f"DuplicateIdError({canonical_id}): declared by {first} and {second}")
        self.canonical_id = canonical_id
        self.locations: tuple[Path, Path] = (first, second)


class MalformedMetadataError(CatalogError):
    """Raised when a fragment metadata header is missing or invalid."""

    def __init__(self, location: Path, detail: str) -> None:
        """Create the error for the fragment at ``location``.

        Args:
            location: Fragment file whose header failed to parse.
            detail: Description of the offending field or value.
        """

        super().__init__(f"MalformedMetadataError({location}): {detail}")
        self.location = location
        self.detail = detail


class DeclarationError(CatalogError):
    """Raised when a registry, relationship, or stack document is invalid."""


# --------------------------------------------------------------------------- per-consumer


class ConsumerError(SkillstackError):
    """Base class for failures scoped to a single consumer pipeline."""

    @property
    def diagnostic(self) -> str:
        """Return the run-report diagnostic describing this failure."""

        return str(self)


class UnresolvedReferenceError(ConsumerError):
    """Raised when a reference cannot be mapped onto a catalog entry."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"UnresolvedReferenceError({reference})")
        self.reference = reference


class ConflictError(ConsumerError):
    """Raised when a selection contains two mutually exclusive fragments."""

    def __init__(
        self,
        subject: str,
        target: str,
        *,
        canonical: tuple[str, str] | None = None,
        reason: str = "",
    ) -> None:
        """Create the error for the conflicting ``subject`` and ``target``.

        Args:
            subject: Stack reference of the rule subject.
            target: Stack reference of the conflicting target.
            canonical: Canonical identifiers of the pair, when known.
            reason: Human-readable rule explanation.
        """

        message = f"ConflictError({subject}, {target})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.subject = subject
        self.target = target
        self.canonical = canonical or (subject, target)
        self.reason = reason


class MissingDependencyError(ConsumerError):
    """Raised when a selected fragment lacks its required companions."""

    def __init__(
        self,
        subject: str,
        targets: Iterable[str],
        cardinality: Cardinality,
        *,
        reason: str = "",
    ) -> None:
        """Create the error for ``subject`` missing ``targets``.

        Args:
            subject: Stack reference of the fragment declaring the requirement.
            targets: Canonical identifiers named by the requirement.
            cardinality: Whether all or any of ``targets`` are needed.
            reason: Human-readable rule explanation.
        """

        ordered = tuple(sorted(targets))
        message = f"MissingDependencyError({subject}, [{', '.join(ordered)}], {cardinality.value})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.subject = subject
        self.targets = ordered
        self.cardinality = cardinality
        self.reason = reason


class UnknownConsumerError(ConsumerError):
    """Raised when a stack names a consumer missing from the global registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"UnknownConsumerError({name})")
        self.name = name


class IncompleteDocumentError(ConsumerError):
    """Raised when a compiled document lacks a required structural marker."""

    def __init__(self, marker: str) -> None:
        super().__init__(f"IncompleteDocumentError({marker})")
        self.marker = marker


__all__ = [
    "CatalogError",
    "ConfigError",
    "ConflictError",
    "ConsumerError",
    "DeclarationError",
    "DuplicateIdError",
    "IncompleteDocumentError",
    "MalformedMetadataError",
    "MissingDependencyError",
    "SkillstackError",
    "UnknownConsumerError",
    "UnresolvedReferenceError",
]
