# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Renderers for the individual blocks of a compiled document."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final

import yaml

from ..catalog.models import FragmentMetadata, derive_display_name
from ..constants import OUTPUT_FORMAT_SECTION, SECTION_SEPARATOR
from ..consumers.models import ConsumerDefinition, Section

SELF_CHECK_BLOCK: Final[str] = "\n".join(
    (
        "<self_check>",
        "Before finishing, confirm that:",
        "- the work stayed within the role described above;",
        "- only the allowed capabilities were used;",
        "- every applicable preloaded skill was followed;",
        "- the response matches the required output format.",
        "</self_check>",
    ),
)


def render_front_matter(definition: ConsumerDefinition) -> str:
    """Return the YAML front matter block identifying the consumer."""

    header: dict[str, str] = {"name": definition.name, "description": definition.description}
    if definition.execution_model:
        header["model"] = definition.execution_model
    if definition.allowed_capabilities:
        header["tools"] = ", ".join(definition.allowed_capabilities)
    dumped = yaml.safe_dump(header, sort_keys=False, allow_unicode=True, width=1_000_000)
    return f"---\n{dumped}---"


def render_role(definition: ConsumerDefinition) -> str:
    """Return the identity block followed by the consumer's own sections.

    A section named ``output-format`` is rendered last inside an
    ``<output_format>`` block.
    """

    blocks = [f"<role>\n# {definition.title}\n\n{definition.description.strip()}\n</role>"]
    output_format: Section | None = None
    for section in definition.sections:
        if section.name == OUTPUT_FORMAT_SECTION:
            output_format = section
            continue
        blocks.append(_render_section(section))
    if output_format is not None:
        blocks.append(f"<output_format>\n{_render_section(output_format)}\n</output_format>")
    return "\n\n".join(blocks)


def render_constraints(capabilities: Sequence[str]) -> str | None:
    """Return the constraints block, or ``None`` when no capability is allowed."""

    if not capabilities:
        return None
    lines = ["<constraints>", "## Allowed capabilities", ""]
    lines.extend(f"- {capability}" for capability in capabilities)
    lines.extend(("", "Do not use any capability that is not listed above.", "</constraints>"))
    return "\n".join(lines)


def render_inline_fragments(bodies: Sequence[str]) -> str | None:
    """Return the preloaded fragment bodies joined in assignment order."""

    if not bodies:
        return None
    return f"<preloaded_skills>\n{SECTION_SEPARATOR.join(bodies)}\n</preloaded_skills>"


def render_fragment_index(fragments: Sequence[FragmentMetadata], catalog_root: Path) -> str | None:
    """Return the index of fragments the consumer may load on demand."""

    if not fragments:
        return None
    lines = ["<available_skills>"]
    for fragment in fragments:
        location = fragment.storage_location.relative_to(catalog_root).as_posix()
        lines.append(f"- **{fragment.display_name}** (`{fragment.canonical_id}`): {fragment.description}")
        lines.append(f"  Load from `{location}`.")
        if fragment.usage:
            lines.append(f"  Use when: {fragment.usage}")
    lines.append("</available_skills>")
    return "\n".join(lines)


def _render_section(section: Section) -> str:
    title = section.title or derive_display_name(section.name)
    return f"## {title}\n\n{section.body}".rstrip()


__all__ = [
    "SELF_CHECK_BLOCK",
    "render_constraints",
    "render_fragment_index",
    "render_front_matter",
    "render_inline_fragments",
    "render_role",
]
