# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for fragment catalog scanning."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillstack.catalog import CatalogScanner, derive_display_name
from skillstack.catalog.io import split_front_matter
from skillstack.errors import DeclarationError, DuplicateIdError, MalformedMetadataError


def test_scan_sorts_fragments_and_derives_metadata(project_root: Path) -> None:
    catalog = CatalogScanner(project_root / "fragments").scan()

    assert [fragment.canonical_id for fragment in catalog] == [
        "auth-oauth",
        "database-drizzle",
        "database-prisma",
        "react-framework",
        "unit-vitest (@vince)",
        "vue-framework",
    ]
    react = catalog.get("react-framework")
    assert react is not None
    assert react.display_name == "React Framework"
    assert react.legacy_path == "frontend/framework/react-framework"
    assert react.standalone is True
    assert react.usage == "building React views"
    assert react.author_tag is None

    vitest = catalog.get("unit-vitest (@vince)")
    assert vitest is not None
    assert vitest.author_tag == "vince"
    assert vitest.base_name == "unit-vitest"
    assert vitest.storage_location.is_file()
    assert catalog.by_legacy_path("testing/unit-vitest (@vince)") is vitest


def test_duplicate_canonical_id_names_both_locations(tmp_path: Path, fragment_writer) -> None:
    first = fragment_writer(tmp_path, "a/logging", "logging-core")
    second = fragment_writer(tmp_path, "b/logging", "logging-core")

    with pytest.raises(DuplicateIdError) as excinfo:
        CatalogScanner(tmp_path).scan()

    assert excinfo.value.canonical_id == "logging-core"
    assert excinfo.value.locations == (first, second)
    assert "DuplicateIdError(logging-core)" in str(excinfo.value)


def test_missing_header_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "plain" / "SKILL.md"
    path.parent.mkdir()
    path.write_text("# No header\n", encoding="utf-8")

    with pytest.raises(MalformedMetadataError) as excinfo:
        CatalogScanner(tmp_path).scan()

    assert excinfo.value.location == path


@pytest.mark.parametrize(
    ("header", "detail"),
    [
        ("name: alpha\n", "missing required field 'description'"),
        ("description: no name\n", "missing required field 'name'"),
        ("name: Alpha_Beta\ndescription: bad id\n", "canonical id 'Alpha_Beta'"),
        ("- just\n- a list\n", "metadata header must be a mapping"),
        ("name: alpha\ndescription: x\nstandalone: maybe\n", "standalone"),
    ],
)
def test_invalid_headers_are_rejected(tmp_path: Path, header: str, detail: str) -> None:
    path = tmp_path / "frag" / "SKILL.md"
    path.parent.mkdir()
    path.write_text(f"---\n{header}---\nbody\n", encoding="utf-8")

    with pytest.raises(MalformedMetadataError) as excinfo:
        CatalogScanner(tmp_path).scan()

    assert detail in str(excinfo.value)


def test_hidden_and_private_directories_are_skipped(tmp_path: Path, fragment_writer) -> None:
    fragment_writer(tmp_path, "visible", "visible-skill")
    fragment_writer(tmp_path, ".hidden", "hidden-skill")
    fragment_writer(tmp_path, "_drafts/wip", "draft-skill")

    catalog = CatalogScanner(tmp_path).scan()

    assert catalog.ids == frozenset({"visible-skill"})


def test_author_header_is_used_without_suffix(tmp_path: Path, fragment_writer) -> None:
    fragment_writer(tmp_path, "x", "api-design", extra="author: '@jane'")

    fragment = CatalogScanner(tmp_path).scan().get("api-design")

    assert fragment is not None
    assert fragment.author_tag == "jane"


def test_checksum_tracks_fragment_contents(tmp_path: Path, fragment_writer) -> None:
    path = fragment_writer(tmp_path, "one", "one-skill")
    before = CatalogScanner(tmp_path).scan().checksum
    assert CatalogScanner(tmp_path).scan().checksum == before

    path.write_text(path.read_text(encoding="utf-8") + "\nMore guidance.\n", encoding="utf-8")

    assert CatalogScanner(tmp_path).scan().checksum != before


def test_missing_root_is_a_declaration_error(tmp_path: Path) -> None:
    with pytest.raises(DeclarationError):
        CatalogScanner(tmp_path / "absent").scan()


def test_split_front_matter_strips_surrounding_blank_lines() -> None:
    split = split_front_matter("---\nname: a\n---\n\n\nBody text\n")

    assert split.header == "name: a"
    assert split.body == "Body text"
    assert split_front_matter("no header").header is None


def test_derive_display_name_strips_author_and_path() -> None:
    assert derive_display_name("frontend/react-query (@vince)") == "React Query"
