# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for validating and normalising declarative documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..errors import DeclarationError
from .types import JSONValue


def expect_string(value: JSONValue | None, *, key: str, context: str) -> str:
    """Return ``value`` coerced to ``str`` or raise a declaration error.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str: Value coerced to a string.

    Raises:
        DeclarationError: If ``value`` is not a non-empty string.
    """
    if not isinstance(value, str) or not value.strip():
        raise DeclarationError(f"{context}: expected '{key}' to be a non-empty string")
    return value


def optional_string(value: JSONValue | None, *, key: str, context: str) -> str | None:
    """Return ``value`` as an optional string with validation.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str | None: ``value`` when present, otherwise ``None``.

    Raises:
        DeclarationError: If ``value`` is present but not a string.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise DeclarationError(f"{context}: expected '{key}' to be a string if present")
    return value


def optional_bool(value: JSONValue | None, *, key: str, context: str, default: bool = False) -> bool:
    """Return ``value`` coerced to ``bool`` with a default.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.
        default: Value returned when ``value`` is ``None``.

    Returns:
        bool: Boolean value derived from ``value`` or ``default``.

    Raises:
        DeclarationError: If ``value`` is present but not a boolean.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise DeclarationError(f"{context}: expected '{key}' to be a boolean")


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return ``value`` as a tuple of strings with validation.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        tuple[str, ...]: Tuple containing all string entries from ``value``.

    Raises:
        DeclarationError: If ``value`` is not a sequence of strings.
    """
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise DeclarationError(f"{context}: expected '{key}' to be an array of strings")
    result: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise DeclarationError(f"{context}: expected '{key}[{index}]' to be a string")
        result.append(item)
    return tuple(result)


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping or raise an error.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        Mapping[str, JSONValue]: Mapping derived from ``value``.

    Raises:
        DeclarationError: If ``value`` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise DeclarationError(f"{context}: expected '{key}' to be an object")
    return value


def optional_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping, treating ``None`` as empty."""

    if value is None:
        return {}
    return expect_mapping(value, key=key, context=context)


def string_mapping(value: JSONValue | None, *, key: str, context: str) -> dict[str, str]:
    """Return ``value`` as a mapping of strings preserving declaration order.

    Args:
        value: Raw value extracted from the document payload.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        dict[str, str]: Mapping containing string keys and string values.

    Raises:
        DeclarationError: If ``value`` is not a mapping of strings.
    """
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DeclarationError(f"{context}: expected '{key}' to be an object")
    result: dict[str, str] = {}
    for item_key, item_value in value.items():
        if not isinstance(item_key, str) or not isinstance(item_value, str):
            raise DeclarationError(f"{context}: expected '{key}' to be a mapping of strings")
        result[item_key] = item_value
    return result


__all__ = [
    "expect_mapping",
    "expect_string",
    "optional_bool",
    "optional_mapping",
    "optional_string",
    "string_array",
    "string_mapping",
]
