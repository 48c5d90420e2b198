# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Merge global consumer definitions with stack-scoped selections."""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import UnknownConsumerError
from ..resolution.resolver import ResolutionTable
from .models import (
    ConsumerDefinition,
    ConsumerOverrides,
    ReplaceableField,
    ResolvedConsumer,
    ResolvedFragment,
    Section,
    StackSelection,
)
from .registry import ConsumerRegistry


def merge(definition: ConsumerDefinition, selection: StackSelection, table: ResolutionTable) -> ResolvedConsumer:
    """Apply ``selection`` to ``definition`` and resolve its fragments.

    Scalar overrides replace the registry value. ``allowed_capabilities`` and
    ``sections`` are unioned with the registry lists unless the selection
    names them in ``replace``. Sections are matched by name and the override
    body wins.

    Args:
        definition: Registry definition for the consumer.
        selection: Stack selection naming fragments and overrides.
        table: Resolution table for the run.

    Returns:
        ResolvedConsumer: Merged definition with inline and referenced
        fragments in stack-declared order.

    Raises:
        UnresolvedReferenceError: If a fragment reference does not resolve.
    """

    merged = _merge_definition(definition, selection.overrides, selection.replace)
    inline: list[ResolvedFragment] = []
    referenced: list[ResolvedFragment] = []
    seen: set[str] = set()
    for ref in selection.fragment_refs:
        resolved = table.resolve(ref.reference)
        if resolved.canonical_id in seen:
            continue
        seen.add(resolved.canonical_id)
        fragment = ResolvedFragment(
            reference=ref.reference,
            canonical_id=resolved.canonical_id,
            storage_location=resolved.storage_location,
            inline=ref.inline,
            form=resolved.form,
        )
        (inline if ref.inline else referenced).append(fragment)
    return ResolvedConsumer(
        definition=merged,
        inline_fragments=tuple(inline),
        referenced_fragments=tuple(referenced),
    )


def merge_from_registry(
    registry: ConsumerRegistry,
    selection: StackSelection,
    table: ResolutionTable,
) -> ResolvedConsumer:
    """Look up the registry definition for ``selection`` and merge it.

    Raises:
        UnknownConsumerError: If the registry has no such consumer.
    """

    definition = registry.get(selection.consumer_name)
    if definition is None:
        raise UnknownConsumerError(selection.consumer_name)
    return merge(definition, selection, table)


def _merge_definition(
    definition: ConsumerDefinition,
    overrides: ConsumerOverrides,
    replace: frozenset[ReplaceableField],
) -> ConsumerDefinition:
    if ReplaceableField.ALLOWED_CAPABILITIES in replace:
        capabilities = _unique(overrides.allowed_capabilities)
    else:
        capabilities = _unique((*definition.allowed_capabilities, *overrides.allowed_capabilities))
    if ReplaceableField.SECTIONS in replace:
        sections = overrides.sections
    else:
        sections = _merge_sections(definition.sections, overrides.sections)
    return ConsumerDefinition(
        name=definition.name,
        title=overrides.title or definition.title,
        description=overrides.description or definition.description,
        execution_model=overrides.execution_model or definition.execution_model,
        allowed_capabilities=capabilities,
        sections=sections,
    )


def _merge_sections(base: tuple[Section, ...], extra: tuple[Section, ...]) -> tuple[Section, ...]:
    merged = {section.name: section for section in base}
    for section in extra:
        previous = merged.get(section.name)
        if previous is not None and section.title is None:
            section = Section(name=section.name, body=section.body, title=previous.title)
        merged[section.name] = section
    return tuple(merged.values())


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


__all__ = ["merge", "merge_from_registry"]
