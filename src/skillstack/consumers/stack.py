# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load per-deployment stack documents."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..catalog.io import load_yaml_document
from ..catalog.schema import DocumentKind, SchemaRepository
from ..catalog.types import JSONValue
from ..catalog.utils import expect_mapping, optional_bool, optional_mapping, optional_string, string_array
from ..constants import STACK_DOCUMENT_SUFFIXES
from ..errors import DeclarationError
from .models import ConsumerOverrides, FragmentRef, ReplaceableField, StackDocument, StackSelection
from .registry import parse_sections

LOGGER = logging.getLogger(__name__)


def find_stack_document(stacks_dir: Path, stack: str, *, root: Path | None = None) -> Path:
    """Return the document for ``stack`` inside ``stacks_dir``.

    ``stack`` may also be a path to a document; a relative path is anchored
    at ``root`` when given.

    Raises:
        DeclarationError: If no document exists for ``stack``.
    """

    direct = Path(stack)
    if root is not None and not direct.is_absolute():
        direct = root / direct
    if direct.suffix in STACK_DOCUMENT_SUFFIXES and direct.is_file():
        return direct
    for suffix in STACK_DOCUMENT_SUFFIXES:
        candidate = stacks_dir / f"{stack}{suffix}"
        if candidate.is_file():
            return candidate
    raise DeclarationError(f"{stacks_dir}: no stack document for '{stack}'")


def list_stacks(stacks_dir: Path) -> tuple[str, ...]:
    """Return the names of every stack document in ``stacks_dir``."""

    if not stacks_dir.is_dir():
        return ()
    return tuple(
        sorted(path.stem for path in stacks_dir.iterdir() if path.is_file() and path.suffix in STACK_DOCUMENT_SUFFIXES),
    )


def load_stack(path: Path, schemas: SchemaRepository | None = None) -> StackDocument:
    """Load and validate the stack document stored at ``path``.

    Consumers listing no fragments of their own (or mapped to ``null``) use
    the stack-level ``fragments`` list.

    Args:
        path: Stack document location.
        schemas: Schema repository used for validation.

    Returns:
        StackDocument: Selections in stack-declared order.

    Raises:
        DeclarationError: If the document is missing or invalid.
    """

    repository = schemas or SchemaRepository.load()
    payload = load_yaml_document(path)
    repository.validate(DocumentKind.STACK, payload, source=path)
    context = str(path)
    document = expect_mapping(payload, key="document", context=context)
    defaults = _fragment_refs(document.get("fragments"), context=f"{context}: fragments")
    consumers = expect_mapping(document.get("consumers"), key="consumers", context=context)

    selections: list[StackSelection] = []
    for consumer_name, raw in consumers.items():
        entry_context = f"{context}: consumers.{consumer_name}"
        entry = optional_mapping(raw, key=consumer_name, context=entry_context)
        refs = _fragment_refs(entry.get("fragments"), context=f"{entry_context}.fragments")
        selections.append(
            StackSelection(
                consumer_name=consumer_name,
                fragment_refs=refs if "fragments" in entry else defaults,
                overrides=_overrides(entry.get("overrides"), base_dir=path.parent, context=entry_context),
                replace=frozenset(
                    ReplaceableField(item)
                    for item in string_array(entry.get("replace"), key="replace", context=entry_context)
                ),
            ),
        )
    name = optional_string(document.get("name"), key="name", context=context) or path.stem
    LOGGER.debug("loaded stack %s with %d consumers", name, len(selections))
    return StackDocument(
        name=name,
        source=path,
        selections=tuple(selections),
        description=optional_string(document.get("description"), key="description", context=context),
    )


def _fragment_refs(value: JSONValue | None, *, context: str) -> tuple[FragmentRef, ...]:
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise DeclarationError(f"{context}: expected an array of fragment references")
    refs: list[FragmentRef] = []
    for index, item in enumerate(value):
        if isinstance(item, str):
            refs.append(FragmentRef(reference=item))
            continue
        item_context = f"{context}[{index}]"
        entry = expect_mapping(item, key="fragment", context=item_context)
        reference = optional_string(entry.get("ref"), key="ref", context=item_context)
        if not reference:
            raise DeclarationError(f"{item_context}: expected 'ref' to be a non-empty string")
        refs.append(
            FragmentRef(
                reference=reference,
                inline=optional_bool(entry.get("inline"), key="inline", context=item_context),
            ),
        )
    return tuple(refs)


def _overrides(value: JSONValue | None, *, base_dir: Path, context: str) -> ConsumerOverrides:
    entry = optional_mapping(value, key="overrides", context=context)
    override_context = f"{context}.overrides"
    return ConsumerOverrides(
        title=optional_string(entry.get("title"), key="title", context=override_context),
        description=optional_string(entry.get("description"), key="description", context=override_context),
        execution_model=optional_string(entry.get("execution_model"), key="execution_model", context=override_context),
        allowed_capabilities=string_array(
            entry.get("allowed_capabilities"),
            key="allowed_capabilities",
            context=override_context,
        ),
        sections=parse_sections(entry.get("sections"), base_dir=base_dir, context=override_context),
    )


__all__ = ["find_stack_document", "list_stacks", "load_stack"]
