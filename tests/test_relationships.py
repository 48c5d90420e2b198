# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for relationship loading and selection validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillstack.catalog import Catalog, CatalogScanner
from skillstack.errors import ConflictError, DeclarationError, MissingDependencyError
from skillstack.relationships import (
    Cardinality,
    RelationshipKind,
    RelationshipRule,
    RelationshipValidator,
    load_declarations,
)


@pytest.fixture
def catalog(project_root: Path) -> Catalog:
    return CatalogScanner(project_root / "fragments").scan()


@pytest.fixture
def validator(catalog: Catalog, project_root: Path) -> RelationshipValidator:
    declarations, _ = load_declarations(catalog, project_root / "relationships.yaml")
    return RelationshipValidator(declarations.rules)


def _rule(kind: RelationshipKind, subjects: set[str], targets: set[str], **kwargs) -> RelationshipRule:
    return RelationshipRule(kind=kind, subjects=frozenset(subjects), targets=frozenset(targets), **kwargs)


def test_loader_resolves_aliases_in_rules(catalog: Catalog, project_root: Path) -> None:
    declarations, table = load_declarations(catalog, project_root / "relationships.yaml")

    conflict = next(rule for rule in declarations.rules if rule.kind is RelationshipKind.CONFLICT)
    assert conflict.subjects == frozenset({"react-framework", "vue-framework"})
    assert conflict.symmetric is True
    assert table.reverse_alias("unit-vitest (@vince)") == "vitest"


def test_conflict_is_reported_with_stack_references(validator: RelationshipValidator) -> None:
    with pytest.raises(ConflictError) as excinfo:
        validator.validate({"react-framework": "react-framework", "vue-framework": "vue-framework"})

    assert excinfo.value.diagnostic == "ConflictError(react-framework, vue-framework): pick one frontend framework"


def test_conflict_symmetry(validator: RelationshipValidator) -> None:
    forward = {"react-framework": "react", "vue-framework": "vue"}
    backward = {"vue-framework": "vue", "react-framework": "react"}

    with pytest.raises(ConflictError) as first:
        validator.validate(forward)
    with pytest.raises(ConflictError) as second:
        validator.validate(backward)

    assert str(first.value) == str(second.value)
    assert first.value.canonical == ("react-framework", "vue-framework")


def test_missing_dependency(validator: RelationshipValidator) -> None:
    with pytest.raises(MissingDependencyError) as excinfo:
        validator.validate({"auth-oauth": "auth-oauth"})

    assert str(excinfo.value).startswith("MissingDependencyError(auth-oauth, [database-drizzle], all)")
    assert excinfo.value.cardinality is Cardinality.ALL


def test_requires_any_needs_one_target() -> None:
    rule = _rule(
        RelationshipKind.REQUIRES,
        {"auth-oauth"},
        {"database-drizzle", "database-prisma"},
        cardinality=Cardinality.ANY,
    )
    validator = RelationshipValidator((rule,))

    validator.validate({"auth-oauth": "auth-oauth", "database-prisma": "database-prisma"})
    with pytest.raises(MissingDependencyError) as excinfo:
        validator.validate({"auth-oauth": "auth-oauth"})

    assert "[database-drizzle, database-prisma], any" in str(excinfo.value)


def test_recommendation_is_advisory(validator: RelationshipValidator) -> None:
    outcome = validator.validate({"react-framework": "react"})

    assert len(outcome.advisories) == 1
    advisory = outcome.advisories[0]
    assert advisory.kind is RelationshipKind.RECOMMENDS
    assert advisory.subject == "react"
    assert advisory.targets == ("unit-vitest (@vince)",)
    assert advisory.message == "react recommends unit-vitest (@vince): components need tests"


def test_recommendation_skipped_when_target_conflicts() -> None:
    rules = (
        _rule(RelationshipKind.RECOMMENDS, {"react-framework"}, {"unit-vitest (@vince)"}),
        _rule(RelationshipKind.CONFLICT, {"unit-vitest (@vince)"}, {"unit-jest"}),
    )
    outcome = RelationshipValidator(rules).validate({"react-framework": "react", "unit-jest": "unit-jest"})

    assert outcome.advisories == ()


def test_discourages_and_alternatives() -> None:
    rules = (
        _rule(
            RelationshipKind.DISCOURAGES,
            {"database-drizzle", "database-prisma"},
            {"database-drizzle", "database-prisma"},
            reason="two ORMs",
            symmetric=True,
        ),
        _rule(
            RelationshipKind.ALTERNATIVE,
            {"react-framework", "vue-framework"},
            {"react-framework", "vue-framework"},
            reason="frontend framework",
            symmetric=True,
        ),
    )
    outcome = RelationshipValidator(rules).validate(
        {"database-drizzle": "drizzle", "database-prisma": "prisma", "react-framework": "react"},
    )

    assert [advisory.message for advisory in outcome.advisories] == ["drizzle discourages prisma: two ORMs"]
    assert [suggestion.message for suggestion in outcome.suggestions] == [
        "react has alternatives vue-framework (frontend framework)",
    ]


def test_fragment_header_relations_become_rules(tmp_path: Path, fragment_writer) -> None:
    fragment_writer(tmp_path, "a", "api-client", extra="requires: [http-core]\nconflicts_with: [legacy-client]")
    fragment_writer(tmp_path, "b", "http-core")
    fragment_writer(tmp_path, "c", "legacy-client")
    catalog = CatalogScanner(tmp_path).scan()

    declarations, _ = load_declarations(catalog, None)
    validator = RelationshipValidator(declarations.rules)

    with pytest.raises(MissingDependencyError):
        validator.validate({"api-client": "api-client"})
    with pytest.raises(ConflictError):
        validator.validate({"api-client": "api-client", "http-core": "http-core", "legacy-client": "legacy-client"})


def test_rule_naming_unknown_fragment_is_rejected(catalog: Catalog, tmp_path: Path) -> None:
    document = tmp_path / "relationships.yaml"
    document.write_text("requires:\n  - skill: auth-oauth\n    needs: [database-mongo]\n", encoding="utf-8")

    with pytest.raises(DeclarationError, match="database-mongo"):
        load_declarations(catalog, document)


def test_schema_violation_is_rejected(catalog: Catalog, tmp_path: Path) -> None:
    document = tmp_path / "relationships.yaml"
    document.write_text("conflicts:\n  - reason: nothing to conflict with\n", encoding="utf-8")

    with pytest.raises(DeclarationError, match="relationships document invalid"):
        load_declarations(catalog, document)
