# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for reference classification and the resolution table."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillstack.catalog import Catalog, CatalogScanner
from skillstack.errors import DeclarationError, UnresolvedReferenceError
from skillstack.relationships import load_declarations
from skillstack.resolution import (
    AliasReference,
    CanonicalReference,
    LegacyPathReference,
    ReferenceForm,
    ResolutionTable,
    classify_reference,
    decompose_legacy_path,
)


@pytest.fixture
def catalog(project_root: Path) -> Catalog:
    return CatalogScanner(project_root / "fragments").scan()


@pytest.fixture
def table(catalog: Catalog, project_root: Path) -> ResolutionTable:
    _, resolution = load_declarations(catalog, project_root / "relationships.yaml")
    return resolution


def test_classify_reference_variants() -> None:
    aliases = {"react": "react-framework"}

    assert classify_reference("react", aliases) == AliasReference(raw="react", target="react-framework")
    assert classify_reference("react-framework", aliases) == CanonicalReference(raw="react-framework")
    legacy = classify_reference("frontend/framework/react-framework (@vince)", aliases)
    assert isinstance(legacy, LegacyPathReference)
    assert legacy.directories == ("frontend", "framework")
    assert legacy.name == "react-framework"
    assert legacy.author == "vince"
    assert legacy.candidates() == ("react-framework (@vince)", "react-framework")


def test_decompose_rejects_empty_segments() -> None:
    assert decompose_legacy_path("frontend//react") is None
    single = decompose_legacy_path("unit-vitest(@Vince)")
    assert single is not None
    assert single.candidates() == ("unit-vitest (@vince)", "unit-vitest")


def test_alias_transparency(table: ResolutionTable) -> None:
    for alias, target in table.aliases.items():
        via_alias = table.resolve(alias)
        direct = table.resolve(target)
        assert via_alias.canonical_id == direct.canonical_id
        assert via_alias.storage_location == direct.storage_location
        assert via_alias.form is ReferenceForm.ALIAS
        assert direct.form is ReferenceForm.CANONICAL


def test_no_dangling_entries(table: ResolutionTable, catalog: Catalog) -> None:
    for fragment in catalog:
        resolved = table.resolve(fragment.canonical_id)
        assert resolved.storage_location.is_file()
    for alias in table.aliases:
        assert table.resolve(alias).storage_location.is_file()


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("frontend/framework/react-framework", "react-framework"),
        ("testing/unit-vitest (@vince)", "unit-vitest (@vince)"),
        ("old/category/unit-vitest(@vince)", "unit-vitest (@vince)"),
        ("legacy/Database-Prisma", "database-prisma"),
    ],
)
def test_legacy_paths_resolve(table: ResolutionTable, reference: str, expected: str) -> None:
    resolved = table.resolve(reference)

    assert resolved.canonical_id == expected
    assert resolved.form is ReferenceForm.LEGACY_PATH
    assert resolved.reference == reference


def test_unresolved_reference_names_the_input(table: ResolutionTable) -> None:
    with pytest.raises(UnresolvedReferenceError) as excinfo:
        table.resolve("frontend/angular")

    assert excinfo.value.diagnostic == "UnresolvedReferenceError(frontend/angular)"


def test_reverse_alias_returns_first_declared(catalog: Catalog) -> None:
    table = ResolutionTable.build(catalog, {"r": "react-framework", "react": "react-framework"})

    assert table.reverse_alias("react-framework") == "r"
    assert table.reverse_alias("vue-framework") is None


def test_alias_to_unknown_fragment_is_rejected(catalog: Catalog) -> None:
    with pytest.raises(DeclarationError, match="unknown fragment 'svelte-framework'"):
        ResolutionTable.build(catalog, {"svelte": "svelte-framework"})


def test_alias_shadowing_another_canonical_id_is_rejected(catalog: Catalog) -> None:
    with pytest.raises(DeclarationError, match="shadows"):
        ResolutionTable.build(catalog, {"vue-framework": "react-framework"})
