# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for document compilation, output validation, and packaging."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skillstack.catalog import Catalog, CatalogScanner
from skillstack.compiler import (
    SELF_CHECK_BLOCK,
    DocumentCompiler,
    build_manifest,
    missing_markers,
    package_fragments,
    packaged_name,
    structural_lines,
    validate_document,
)
from skillstack.consumers import (
    CompiledDocument,
    ConsumerRegistry,
    FragmentRef,
    StackSelection,
    load_registry,
    merge_from_registry,
)
from skillstack.errors import IncompleteDocumentError
from skillstack.relationships import load_declarations
from skillstack.resolution import ResolutionTable


@pytest.fixture
def catalog(project_root: Path) -> Catalog:
    return CatalogScanner(project_root / "fragments").scan()


@pytest.fixture
def table(catalog: Catalog, project_root: Path) -> ResolutionTable:
    _, resolution = load_declarations(catalog, project_root / "relationships.yaml")
    return resolution


@pytest.fixture
def registry(project_root: Path) -> ConsumerRegistry:
    return load_registry(project_root / "consumers.yaml")


def _compile(
    catalog: Catalog,
    table: ResolutionTable,
    registry: ConsumerRegistry,
    consumer: str,
    *refs: FragmentRef,
) -> CompiledDocument:
    resolved = merge_from_registry(registry, StackSelection(consumer_name=consumer, fragment_refs=refs), table)
    return DocumentCompiler(catalog).compile(resolved)


def test_alias_and_canonical_references_compile_identically(catalog, table, registry) -> None:
    via_alias = _compile(
        catalog,
        table,
        registry,
        "frontend-developer",
        FragmentRef("react", inline=True),
        FragmentRef("vitest"),
    )
    direct = _compile(
        catalog,
        table,
        registry,
        "frontend-developer",
        FragmentRef("react-framework", inline=True),
        FragmentRef("unit-vitest (@vince)"),
    )

    assert via_alias.text.encode("utf-8") == direct.text.encode("utf-8")


def test_compilation_is_deterministic(catalog, table, registry) -> None:
    refs = (FragmentRef("database-drizzle", inline=True), FragmentRef("auth-oauth"))

    first = _compile(catalog, table, registry, "backend-developer", *refs)
    second = _compile(catalog, table, registry, "backend-developer", *refs)

    assert first == second


def test_blocks_follow_fixed_order(catalog, table, registry) -> None:
    document = _compile(
        catalog,
        table,
        registry,
        "frontend-developer",
        FragmentRef("react", inline=True),
        FragmentRef("vitest"),
    )
    text = document.text

    assert text.startswith("---\nname: frontend-developer\ndescription: Builds user interfaces.\nmodel: sonnet\n")
    assert "tools: Read, Write, Edit\n---" in text
    positions = [
        text.index("<role>"),
        text.index("## Workflow"),
        text.index("<output_format>"),
        text.index("<constraints>"),
        text.index("Prefer function components."),
        text.index("<available_skills>"),
        text.index("<self_check>"),
    ]
    assert positions == sorted(positions)
    assert "Load from `testing/unit-vitest (@vince)/SKILL.md`." in text
    assert "name: react-framework" not in text
    assert text.endswith(SELF_CHECK_BLOCK + "\n")
    assert document.consumer_name == "frontend-developer"


def test_inline_bodies_are_joined_in_assignment_order(catalog, table, registry) -> None:
    document = _compile(
        catalog,
        table,
        registry,
        "backend-developer",
        FragmentRef("database-drizzle", inline=True),
        FragmentRef("react", inline=True),
    )

    assert "Keep schema in one module.\n\n---\n\n# React" in document.text


def test_constraints_omitted_without_capabilities(catalog, table, registry) -> None:
    document = _compile(catalog, table, registry, "reviewer")

    assert "<constraints>" not in document.text
    assert missing_markers(document) == ("<constraints>",)
    with pytest.raises(IncompleteDocumentError) as excinfo:
        validate_document(document)
    assert excinfo.value.diagnostic == "IncompleteDocumentError(<constraints>)"


def test_output_validator_reports_first_missing_marker() -> None:
    document = CompiledDocument(consumer_name="x", text="<output_format>only</output_format>")

    with pytest.raises(IncompleteDocumentError) as excinfo:
        validate_document(document)

    assert excinfo.value.marker == "<role>"
    complete = CompiledDocument(consumer_name="x", text="<role>\n<constraints>\n<output_format>\n")
    assert validate_document(complete) is complete


def test_packaged_names_and_verbatim_copy(catalog: Catalog, tmp_path: Path) -> None:
    react = catalog.get("react-framework")
    vitest = catalog.get("unit-vitest (@vince)")
    vue = catalog.get("vue-framework")
    assert react is not None and vitest is not None and vue is not None

    assert packaged_name(react) == "skill-react-framework"
    assert packaged_name(vitest) == "skill-unit-vitest-vince"

    written = package_fragments([react, vitest, vue], tmp_path)

    assert written == (
        tmp_path / "skill-react-framework" / "SKILL.md",
        tmp_path / "skill-unit-vitest-vince" / "SKILL.md",
    )
    assert written[0].read_bytes() == react.storage_location.read_bytes()


def test_markers_inside_embedded_fragment_blocks_do_not_count() -> None:
    text = "<role>\n<constraints>\n<preloaded_skills>\n<output_format>\nUse tables.\n</output_format>\n</preloaded_skills>\n"
    document = CompiledDocument(consumer_name="x", text=text)

    assert "<output_format>" not in structural_lines(text)
    assert missing_markers(document) == ("<output_format>",)
    with pytest.raises(IncompleteDocumentError) as excinfo:
        validate_document(document)
    assert excinfo.value.marker == "<output_format>"


def test_markers_must_stand_on_their_own_line() -> None:
    document = CompiledDocument(consumer_name="x", text="see <role> here\n<constraints>\n<output_format>\n")

    assert missing_markers(document) == ("<role>",)


def test_packaging_copies_supporting_files_and_writes_manifest(catalog: Catalog, tmp_path: Path) -> None:
    react = catalog.get("react-framework")
    assert react is not None
    source_dir = react.storage_location.parent
    (source_dir / "examples.md").write_text("# Examples\n", encoding="utf-8")
    (source_dir / "reference.md").write_text("# Reference\n", encoding="utf-8")
    (source_dir / "scripts").mkdir()
    (source_dir / "scripts" / "run.sh").write_text("echo ok\n", encoding="utf-8")

    (written,) = package_fragments([react], tmp_path / "out")

    package_dir = written.parent
    assert (package_dir / "examples.md").read_text(encoding="utf-8") == "# Examples\n"
    assert (package_dir / "reference.md").read_text(encoding="utf-8") == "# Reference\n"
    assert (package_dir / "scripts" / "run.sh").read_text(encoding="utf-8") == "echo ok\n"
    assert not (package_dir / "examples").exists()
    manifest = json.loads((package_dir / "plugin.json").read_text(encoding="utf-8"))
    assert manifest == {
        "name": "skill-react-framework",
        "version": "1.0.0",
        "license": "MIT",
        "description": "React component patterns.",
    }
    readme = (package_dir / "README.md").read_text(encoding="utf-8")
    assert readme.startswith("# skill-react-framework\n\nReact component patterns.\n")
    assert "Use when: building React views" in readme


def test_manifest_names_the_fragment_author(catalog: Catalog) -> None:
    vitest = catalog.get("unit-vitest (@vince)")
    assert vitest is not None

    manifest = build_manifest(vitest)

    assert manifest["name"] == "skill-unit-vitest-vince"
    assert manifest["author"] == {"name": "@vince"}
