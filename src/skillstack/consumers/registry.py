# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load the global consumer registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..catalog.io import load_yaml_document, read_text
from ..catalog.schema import DocumentKind, SchemaRepository
from ..catalog.types import JSONValue
from ..catalog.utils import expect_mapping, expect_string, optional_string, string_array
from ..errors import DeclarationError
from .models import ConsumerDefinition, Section

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConsumerRegistry:
    """Read-only view over the consumer definitions of a project."""

    source: Path
    definitions: Mapping[str, ConsumerDefinition]

    def __contains__(self, name: object) -> bool:
        return name in self.definitions

    def __iter__(self) -> Iterator[ConsumerDefinition]:
        return iter(self.definitions.values())

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, name: str) -> ConsumerDefinition | None:
        """Return the definition registered under ``name`` if any."""

        return self.definitions.get(name)


def load_registry(path: Path, schemas: SchemaRepository | None = None) -> ConsumerRegistry:
    """Load and validate the consumer registry stored at ``path``.

    Args:
        path: Registry document location.
        schemas: Schema repository used for validation.

    Returns:
        ConsumerRegistry: Definitions keyed by consumer name.

    Raises:
        DeclarationError: If the document is missing or invalid.
    """

    repository = schemas or SchemaRepository.load()
    payload = load_yaml_document(path)
    repository.validate(DocumentKind.REGISTRY, payload, source=path)
    document = expect_mapping(payload, key="document", context=str(path))
    consumers = expect_mapping(document.get("consumers"), key="consumers", context=str(path))

    definitions: dict[str, ConsumerDefinition] = {}
    for name, raw in consumers.items():
        context = f"{path}: consumers.{name}"
        entry = expect_mapping(raw, key=name, context=context)
        definitions[name] = ConsumerDefinition(
            name=name,
            title=expect_string(entry.get("title"), key="title", context=context),
            description=expect_string(entry.get("description"), key="description", context=context),
            execution_model=optional_string(entry.get("execution_model"), key="execution_model", context=context),
            allowed_capabilities=string_array(
                entry.get("allowed_capabilities"),
                key="allowed_capabilities",
                context=context,
            ),
            sections=parse_sections(entry.get("sections"), base_dir=path.parent, context=context),
        )
    LOGGER.debug("loaded %d consumer definitions from %s", len(definitions), path)
    return ConsumerRegistry(source=path, definitions=definitions)


def parse_sections(value: JSONValue | None, *, base_dir: Path, context: str) -> tuple[Section, ...]:
    """Return sections declared inline or by ``file`` relative to ``base_dir``.

    Raises:
        DeclarationError: If a section is malformed, its name repeats, or its
            file does not exist or cannot be read.
    """

    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise DeclarationError(f"{context}: expected 'sections' to be an array")
    sections: list[Section] = []
    seen: set[str] = set()
    for index, raw in enumerate(value):
        item_context = f"{context}.sections[{index}]"
        entry = expect_mapping(raw, key="section", context=item_context)
        name = expect_string(entry.get("name"), key="name", context=item_context)
        if name in seen:
            raise DeclarationError(f"{item_context}: duplicate section '{name}'")
        seen.add(name)
        file_name = optional_string(entry.get("file"), key="file", context=item_context)
        if file_name is not None:
            section_path = base_dir / file_name
            if not section_path.is_file():
                raise DeclarationError(f"{item_context}: section file {section_path} not found")
            body = read_text(section_path)
        else:
            body = optional_string(entry.get("body"), key="body", context=item_context) or ""
        sections.append(
            Section(
                name=name,
                body=body.strip("\n"),
                title=optional_string(entry.get("title"), key="title", context=item_context),
            ),
        )
    return tuple(sections)


__all__ = ["ConsumerRegistry", "load_registry", "parse_sections"]
