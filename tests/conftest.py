# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from skillstack.config import ProjectPaths, SkillstackConfig

FragmentWriter = Callable[..., Path]
DocumentWriter = Callable[[str, str], Path]

RELATIONSHIPS = """
aliases:
  react: react-framework
  vue: vue-framework
  vitest: unit-vitest (@vince)
conflicts:
  - skills: [react, vue]
    reason: pick one frontend framework
requires:
  - skill: auth-oauth
    needs: [database-drizzle]
    reason: sessions are stored in the database
recommends:
  - when: react
    suggest: [vitest]
    reason: components need tests
alternatives:
  - purpose: database access
    skills: [database-drizzle, database-prisma]
"""

REGISTRY = """
consumers:
  frontend-developer:
    title: Frontend Developer
    description: Builds user interfaces.
    execution_model: sonnet
    allowed_capabilities: [Read, Write, Edit]
    sections:
      - name: workflow
        body: Build one component at a time.
      - name: output-format
        title: Output Format
        body: Summarise every changed file.
  backend-developer:
    title: Backend Developer
    description: Builds services and APIs.
    allowed_capabilities: [Read, Bash]
    sections:
      - name: output-format
        body: List endpoints and migrations.
  reviewer:
    title: Reviewer
    description: Reviews changes without editing them.
    sections:
      - name: output-format
        body: Report findings by severity.
"""

WEB_STACK = """
consumers:
  frontend-developer:
    fragments:
      - ref: react
        inline: true
      - vitest
  backend-developer:
    fragments:
      - auth-oauth
      - ref: database-drizzle
        inline: true
"""


def write_fragment(
    fragments_root: Path,
    relative_dir: str,
    name: str,
    description: str = "Fragment description.",
    *,
    body: str = "",
    extra: str = "",
) -> Path:
    """Write a SKILL.md file under ``fragments_root/relative_dir``."""

    directory = fragments_root / relative_dir
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "SKILL.md"
    header = f"name: {name}\ndescription: {description}\n{extra}".rstrip("\n")
    content = body or f"# {name}\n\nGuidance for {name}."
    path.write_text(f"---\n{header}\n---\n\n{content}\n", encoding="utf-8")
    return path


def _dedent(text: str) -> str:
    return dedent(text).lstrip("\n")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a complete sample project rooted in ``tmp_path``."""

    root = tmp_path / "project"
    fragments = root / "fragments"
    write_fragment(
        fragments,
        "frontend/framework/react-framework",
        "react-framework",
        "React component patterns.",
        body="# React\n\nPrefer function components.",
        extra="standalone: true\nusage: building React views",
    )
    write_fragment(fragments, "frontend/framework/vue-framework", "vue-framework", "Vue component patterns.")
    write_fragment(fragments, "backend/auth/auth-oauth", "auth-oauth", "OAuth login flows.")
    write_fragment(
        fragments,
        "backend/database/database-drizzle",
        "database-drizzle",
        "Drizzle ORM usage.",
        body="# Drizzle\n\nKeep schema in one module.",
    )
    write_fragment(fragments, "backend/database/database-prisma", "database-prisma", "Prisma ORM usage.")
    write_fragment(
        fragments,
        "testing/unit-vitest (@vince)",
        "unit-vitest (@vince)",
        "Unit tests with Vitest.",
        extra="standalone: true",
    )
    (root / "relationships.yaml").write_text(_dedent(RELATIONSHIPS), encoding="utf-8")
    (root / "consumers.yaml").write_text(_dedent(REGISTRY), encoding="utf-8")
    stacks = root / "stacks"
    stacks.mkdir()
    (stacks / "web.yaml").write_text(_dedent(WEB_STACK), encoding="utf-8")
    return root


@pytest.fixture
def write_stack(project_root: Path) -> DocumentWriter:
    """Return a helper writing ``stacks/<name>.yaml`` in the sample project."""

    def _write(name: str, content: str) -> Path:
        path = project_root / "stacks" / f"{name}.yaml"
        path.write_text(_dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def project_paths(project_root: Path) -> ProjectPaths:
    """Return resolved default paths for the sample project."""

    return SkillstackConfig().project_paths(project_root)


@pytest.fixture
def fragment_writer() -> FragmentWriter:
    """Return the helper that writes fragment files."""

    return write_fragment
