# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading fragment files, YAML documents, and schemas."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

import yaml

from ..errors import DeclarationError
from .types import JSONValue

_FRONT_MATTER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\A---\n(?P<header>.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)


@dataclass(frozen=True, slots=True)
class FragmentText:
    """Raw header and body text split from a fragment file."""

    header: str | None
    body: str


def read_text(path: Path) -> str:
    """Return the UTF-8 contents of ``path`` with normalised line endings.

    Args:
        path: File to read.

    Returns:
        str: File contents using ``\\n`` line endings.

    Raises:
        DeclarationError: If the file cannot be read or is not valid UTF-8.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeclarationError(f"{path}: cannot read file: {exc}") from exc
    return text.replace("\r\n", "\n")


def split_front_matter(text: str) -> FragmentText:
    """Split ``text`` into its ``---`` delimited header and the remaining body.

    Args:
        text: Complete fragment file contents.

    Returns:
        FragmentText: Header text (``None`` when absent) and the body with
        surrounding blank lines removed.
    """

    match = _FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return FragmentText(header=None, body=text.strip("\n"))
    return FragmentText(header=match.group("header"), body=text[match.end() :].strip("\n"))


def load_fragment_body(path: Path) -> str:
    """Return the body of the fragment stored at ``path``.

    Args:
        path: Fragment file location.

    Returns:
        str: Fragment body with the metadata header removed.
    """

    return split_front_matter(read_text(path)).body


def parse_yaml(text: str, *, context: str) -> JSONValue:
    """Parse ``text`` as YAML using the safe loader.

    Args:
        text: YAML payload.
        context: Human-readable context used in error messages.

    Returns:
        JSONValue: Parsed document.

    Raises:
        DeclarationError: If the payload is not valid YAML.
    """

    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DeclarationError(f"{context}: failed to parse YAML ({exc})") from exc
    return _ensure_json_value(payload, context=context)


def load_yaml_document(path: Path) -> JSONValue:
    """Load a YAML document from disk and validate the payload.

    Args:
        path: Filesystem path to the YAML document.

    Returns:
        JSONValue: Parsed value extracted from the document.

    Raises:
        DeclarationError: If the document is missing, cannot be parsed, or
            contains values without a JSON representation.
    """
    if not path.is_file():
        raise DeclarationError(f"{path}: document not found")
    return parse_yaml(read_text(path), context=str(path))


def load_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON schema from disk and ensure it is a JSON object.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        FileNotFoundError: If the schema file does not exist.
        DeclarationError: If the schema cannot be parsed or is not a JSON object.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = cast(JSONValue, json.load(stream))
        except json.JSONDecodeError as exc:  # pragma: no cover - json module provides rich context
            raise DeclarationError(f"{path}: failed to parse JSON schema") from exc
    if not isinstance(payload, Mapping):
        raise DeclarationError(f"{path}: expected a JSON object")
    return payload


def _ensure_json_value(value: object, *, context: str) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    Args:
        value: Parsed YAML payload to validate recursively.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Validated value.

    Raises:
        DeclarationError: If ``value`` contains unsupported constructs.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        result: dict[str, JSONValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise DeclarationError(f"{context}: key {key!r} must be a string")
            result[key] = _ensure_json_value(item, context=f"{context}.{key}")
        return result
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise DeclarationError(f"{context}: unsupported value of type {type(value).__name__}")


__all__ = [
    "FragmentText",
    "load_fragment_body",
    "load_schema",
    "load_yaml_document",
    "parse_yaml",
    "read_text",
    "split_front_matter",
]
