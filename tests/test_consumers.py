# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for registry and stack loading plus the assignment merger."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillstack.catalog import CatalogScanner
from skillstack.consumers import (
    ConsumerDefinition,
    ConsumerOverrides,
    FragmentRef,
    ReplaceableField,
    Section,
    StackSelection,
    find_stack_document,
    list_stacks,
    load_registry,
    load_stack,
    merge,
    merge_from_registry,
)
from skillstack.errors import DeclarationError, UnknownConsumerError, UnresolvedReferenceError
from skillstack.relationships import load_declarations
from skillstack.resolution import ReferenceForm, ResolutionTable


@pytest.fixture
def table(project_root: Path) -> ResolutionTable:
    catalog = CatalogScanner(project_root / "fragments").scan()
    _, resolution = load_declarations(catalog, project_root / "relationships.yaml")
    return resolution


def _definition() -> ConsumerDefinition:
    return ConsumerDefinition(
        name="frontend-developer",
        title="Frontend Developer",
        description="Builds user interfaces.",
        execution_model="sonnet",
        allowed_capabilities=("Read", "Write"),
        sections=(
            Section(name="workflow", body="Original workflow.", title="Workflow"),
            Section(name="output-format", body="Summarise."),
        ),
    )


def test_load_registry(project_root: Path) -> None:
    registry = load_registry(project_root / "consumers.yaml")

    assert len(registry) == 3
    frontend = registry.get("frontend-developer")
    assert frontend is not None
    assert frontend.allowed_capabilities == ("Read", "Write", "Edit")
    assert [section.name for section in frontend.sections] == ["workflow", "output-format"]
    assert "reviewer" in registry


def test_registry_section_file_is_read_relative_to_document(tmp_path: Path) -> None:
    (tmp_path / "sections").mkdir()
    (tmp_path / "sections" / "format.md").write_text("Use tables.\n", encoding="utf-8")
    registry_path = tmp_path / "consumers.yaml"
    registry_path.write_text(
        "consumers:\n"
        "  analyst:\n"
        "    title: Analyst\n"
        "    description: Reads data.\n"
        "    sections:\n"
        "      - name: output-format\n"
        "        file: sections/format.md\n",
        encoding="utf-8",
    )

    analyst = load_registry(registry_path).get("analyst")

    assert analyst is not None
    assert analyst.sections == (Section(name="output-format", body="Use tables."),)


def test_registry_schema_violation(tmp_path: Path) -> None:
    registry_path = tmp_path / "consumers.yaml"
    registry_path.write_text("consumers:\n  analyst:\n    title: Analyst\n", encoding="utf-8")

    with pytest.raises(DeclarationError, match="registry document invalid"):
        load_registry(registry_path)


def test_registry_section_file_must_be_utf8(tmp_path: Path) -> None:
    (tmp_path / "format.md").write_bytes(b"\xff\xfeUse tables.\n")
    registry_path = tmp_path / "consumers.yaml"
    registry_path.write_text(
        "consumers:\n"
        "  analyst:\n"
        "    title: Analyst\n"
        "    description: Reads data.\n"
        "    sections:\n"
        "      - name: output-format\n"
        "        file: format.md\n",
        encoding="utf-8",
    )

    with pytest.raises(DeclarationError, match="cannot read file"):
        load_registry(registry_path)


def test_registry_rejects_consumer_names_with_path_segments(tmp_path: Path) -> None:
    registry_path = tmp_path / "consumers.yaml"
    registry_path.write_text(
        'consumers:\n  "../escaped":\n    title: Escaped\n    description: Writes outside.\n',
        encoding="utf-8",
    )

    with pytest.raises(DeclarationError, match="registry document invalid"):
        load_registry(registry_path)


def test_load_stack_applies_default_fragments(project_root: Path, write_stack) -> None:
    path = write_stack(
        "defaults",
        """
        fragments: [react, vitest]
        consumers:
          frontend-developer:
          backend-developer:
            fragments: [auth-oauth]
            overrides:
              allowed_capabilities: [Write]
            replace: [allowed_capabilities]
        """,
    )

    stack = load_stack(path)

    assert stack.name == "defaults"
    assert stack.consumer_names == ("frontend-developer", "backend-developer")
    frontend = stack.selection("frontend-developer")
    assert frontend is not None
    assert frontend.fragment_refs == (FragmentRef("react"), FragmentRef("vitest"))
    backend = stack.selection("backend-developer")
    assert backend is not None
    assert backend.fragment_refs == (FragmentRef("auth-oauth"),)
    assert backend.replace == frozenset({ReplaceableField.ALLOWED_CAPABILITIES})


def test_find_and_list_stacks(project_root: Path) -> None:
    stacks_dir = project_root / "stacks"

    assert find_stack_document(stacks_dir, "web") == stacks_dir / "web.yaml"
    assert list_stacks(stacks_dir) == ("web",)
    with pytest.raises(DeclarationError):
        find_stack_document(stacks_dir, "mobile")


def test_find_stack_document_anchors_relative_paths_at_root(project_root: Path) -> None:
    stacks_dir = project_root / "stacks"

    found = find_stack_document(stacks_dir, "stacks/web.yaml", root=project_root)

    assert found == stacks_dir / "web.yaml"


def test_merge_unions_lists_and_override_section_wins(table: ResolutionTable) -> None:
    selection = StackSelection(
        consumer_name="frontend-developer",
        fragment_refs=(FragmentRef("react", inline=True), FragmentRef("vitest"), FragmentRef("react-framework")),
        overrides=ConsumerOverrides(
            title="UI Engineer",
            allowed_capabilities=("Write", "Bash"),
            sections=(Section(name="workflow", body="Stack workflow."), Section(name="testing", body="Test it.")),
        ),
    )

    resolved = merge(_definition(), selection, table)

    definition = resolved.definition
    assert definition.title == "UI Engineer"
    assert definition.description == "Builds user interfaces."
    assert definition.allowed_capabilities == ("Read", "Write", "Bash")
    assert [(section.name, section.body) for section in definition.sections] == [
        ("workflow", "Stack workflow."),
        ("output-format", "Summarise."),
        ("testing", "Test it."),
    ]
    assert definition.sections[0].title == "Workflow"
    assert [fragment.canonical_id for fragment in resolved.inline_fragments] == ["react-framework"]
    assert resolved.inline_fragments[0].form is ReferenceForm.ALIAS
    assert [fragment.canonical_id for fragment in resolved.referenced_fragments] == ["unit-vitest (@vince)"]
    assert resolved.selection() == {"react-framework": "react", "unit-vitest (@vince)": "vitest"}


def test_merge_replace_discards_registry_lists(table: ResolutionTable) -> None:
    selection = StackSelection(
        consumer_name="frontend-developer",
        overrides=ConsumerOverrides(allowed_capabilities=("Read",), sections=(Section(name="only", body="x"),)),
        replace=frozenset({ReplaceableField.ALLOWED_CAPABILITIES, ReplaceableField.SECTIONS}),
    )

    definition = merge(_definition(), selection, table).definition

    assert definition.allowed_capabilities == ("Read",)
    assert [section.name for section in definition.sections] == ["only"]


def test_merge_from_registry_unknown_consumer(project_root: Path, table: ResolutionTable) -> None:
    registry = load_registry(project_root / "consumers.yaml")

    with pytest.raises(UnknownConsumerError) as excinfo:
        merge_from_registry(registry, StackSelection(consumer_name="designer"), table)

    assert excinfo.value.diagnostic == "UnknownConsumerError(designer)"


def test_merge_unresolved_reference(table: ResolutionTable) -> None:
    selection = StackSelection(consumer_name="frontend-developer", fragment_refs=(FragmentRef("svelte"),))

    with pytest.raises(UnresolvedReferenceError):
        merge(_definition(), selection, table)
