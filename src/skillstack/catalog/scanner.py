# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning for fragment definition files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..constants import CANONICAL_ID_PATTERN, FRAGMENT_FILENAME
from ..errors import DeclarationError, DuplicateIdError, MalformedMetadataError
from .checksum import compute_catalog_checksum
from .io import parse_yaml, read_text, split_front_matter
from .models import Catalog, FragmentMetadata, FragmentRelations, derive_display_name
from .types import JSONValue
from .utils import optional_bool, optional_string, string_array

LOGGER = logging.getLogger(__name__)

_REQUIRED_KEYS = ("name", "description")


@dataclass(slots=True)
class CatalogScanner:
    """Scan a fragment tree and materialise its metadata headers."""

    catalog_root: Path
    fragment_filename: str = FRAGMENT_FILENAME

    def fragment_documents(self) -> tuple[Path, ...]:
        """Return sorted fragment file paths beneath ``catalog_root``.

        Hidden directories and files whose name starts with ``_`` are skipped.

        Returns:
            tuple[Path, ...]: Fragment file paths sorted lexicographically.
        """

        paths: list[Path] = []
        for path in self.catalog_root.rglob(self.fragment_filename):
            if not path.is_file():
                continue
            relative_parts = path.relative_to(self.catalog_root).parts
            if any(part.startswith((".", "_")) for part in relative_parts):
                continue
            paths.append(path)
        return tuple(sorted(paths))

    def scan(self) -> Catalog:
        """Parse every fragment header and return the catalog for this run.

        Returns:
            Catalog: Immutable catalog sorted by canonical identifier.

        Raises:
            DeclarationError: If ``catalog_root`` does not exist.
            DuplicateIdError: If two files declare the same canonical id.
            MalformedMetadataError: If a header is missing or invalid.
        """

        if not self.catalog_root.is_dir():
            raise DeclarationError(f"{self.catalog_root}: fragment directory not found")

        documents = self.fragment_documents()
        seen: dict[str, FragmentMetadata] = {}
        for path in documents:
            fragment = self.parse_fragment(path)
            previous = seen.get(fragment.canonical_id)
            if previous is not None:
                raise DuplicateIdError(fragment.canonical_id, previous.storage_location, path)
            seen[fragment.canonical_id] = fragment
            LOGGER.debug("scanned fragment %s from %s", fragment.canonical_id, path)

        ordered = tuple(seen[canonical_id] for canonical_id in sorted(seen))
        checksum = compute_catalog_checksum(self.catalog_root, documents)
        return Catalog(root=self.catalog_root, fragments=ordered, checksum=checksum)

    def parse_fragment(self, path: Path) -> FragmentMetadata:
        """Return the metadata declared by the fragment file at ``path``.

        Args:
            path: Fragment file to parse.

        Returns:
            FragmentMetadata: Metadata extracted from the header.

        Raises:
            MalformedMetadataError: If the header is missing or invalid.
        """

        try:
            text = read_text(path)
        except DeclarationError as exc:
            raise MalformedMetadataError(path, "fragment file is not readable UTF-8 text") from exc
        split = split_front_matter(text)
        if split.header is None:
            raise MalformedMetadataError(path, "missing '---' metadata header")
        try:
            header = parse_yaml(split.header, context=str(path))
        except DeclarationError as exc:
            raise MalformedMetadataError(path, str(exc)) from exc
        if not isinstance(header, Mapping):
            raise MalformedMetadataError(path, "metadata header must be a mapping")
        try:
            return self._build_metadata(path, header)
        except DeclarationError as exc:
            raise MalformedMetadataError(path, str(exc)) from exc

    def _build_metadata(self, path: Path, header: Mapping[str, JSONValue]) -> FragmentMetadata:
        """Validate ``header`` and convert it into :class:`FragmentMetadata`.

        Args:
            path: Fragment file providing ``header``.
            header: Parsed metadata header.

        Returns:
            FragmentMetadata: Validated metadata.

        Raises:
            MalformedMetadataError: If a required key is absent or the
                canonical id breaks the naming rule.
        """

        context = str(path)
        for key in _REQUIRED_KEYS:
            value = header.get(key)
            if not isinstance(value, str) or not value.strip():
                raise MalformedMetadataError(path, f"missing required field '{key}'")
        canonical_id = str(header["name"]).strip()
        match = CANONICAL_ID_PATTERN.match(canonical_id)
        if match is None:
            raise MalformedMetadataError(
                path,
                f"canonical id '{canonical_id}' must be lowercase hyphen-separated tokens "
                "with an optional ' (@author)' suffix",
            )

        author = match.group("author")
        if author is None:
            declared_author = optional_string(header.get("author"), key="author", context=context)
            author = declared_author.lstrip("@") if declared_author else None

        display_name = optional_string(header.get("display_name"), key="display_name", context=context)
        legacy_path = path.parent.relative_to(self.catalog_root).as_posix()
        relations = FragmentRelations(
            requires=string_array(header.get("requires"), key="requires", context=context),
            conflicts_with=string_array(header.get("conflicts_with"), key="conflicts_with", context=context),
            compatible_with=string_array(header.get("compatible_with"), key="compatible_with", context=context),
        )
        return FragmentMetadata(
            canonical_id=canonical_id,
            display_name=display_name or derive_display_name(canonical_id),
            description=str(header["description"]).strip(),
            storage_location=path,
            author_tag=author,
            legacy_path="" if legacy_path == "." else legacy_path,
            usage=optional_string(header.get("usage"), key="usage", context=context),
            standalone=optional_bool(header.get("standalone"), key="standalone", context=context),
            relations=relations,
        )


__all__ = ["CatalogScanner"]
