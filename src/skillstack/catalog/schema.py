# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating declarative documents."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, cast, runtime_checkable

from ..errors import DeclarationError
from .io import load_schema
from .types import JSONValue

DEFAULT_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"


class DocumentKind(str, Enum):
    """Enumerate the declarative document kinds validated by schema."""

    REGISTRY = "registry"
    RELATIONSHIPS = "relationships"
    STACK = "stack"

    @property
    def schema_filename(self) -> str:
        """Return the schema file name associated with the document kind."""

        return f"{self.value}.schema.json"


class SchemaValidationError(Protocol):
    """Represent schema validation errors surfaced by jsonschema."""

    @property
    def message(self) -> str:
        """Return the descriptive validation error message."""

    @property
    def absolute_path(self) -> Sequence[str | int]:
        """Return the path to the offending value inside the instance."""


@runtime_checkable
class SchemaValidator(Protocol):
    """Protocol describing the minimal interface exposed by jsonschema validators."""

    def iter_errors(self, instance: JSONValue) -> Iterable[SchemaValidationError]:
        """Iterate over validation errors for ``instance``.

        Args:
            instance: Payload to validate against the schema.

        Returns:
            Iterable[SchemaValidationError]: Iterator yielding validation errors.
        """


SchemaValidatorFactory = Callable[[JSONValue], SchemaValidator]

jsonschema_module = importlib.import_module("jsonschema")
Draft202012Validator = cast(SchemaValidatorFactory, jsonschema_module.Draft202012Validator)


@dataclass(slots=True)
class SchemaRepository:
    """Manage JSON schema validators for registry, relationship, and stack documents."""

    schema_root: Path
    validators: dict[DocumentKind, SchemaValidator]

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load schema validators from disk.

        Args:
            schema_root: Optional override for the schema directory.

        Returns:
            SchemaRepository: Repository configured with one validator per document kind.
        """
        resolved_root = schema_root or DEFAULT_SCHEMA_ROOT
        validators = {
            kind: Draft202012Validator(load_schema(resolved_root / kind.schema_filename)) for kind in DocumentKind
        }
        return cls(schema_root=resolved_root, validators=validators)

    def validate(self, kind: DocumentKind, document: JSONValue, *, source: Path) -> None:
        """Validate ``document`` against the schema registered for ``kind``.

        Args:
            kind: Document kind selecting the validator.
            document: Parsed document payload.
            source: Path used in error reporting.

        Raises:
            DeclarationError: When the document violates the schema. The
                message names the first offending location.
        """

        errors = sorted(
            self.validators[kind].iter_errors(document),
            key=lambda error: [str(part) for part in error.absolute_path],
        )
        if not errors:
            return
        first = errors[0]
        location = "/".join(str(part) for part in first.absolute_path) or "<root>"
        raise DeclarationError(f"{source}: {kind.value} document invalid at {location}: {first.message}")


__all__ = ["DEFAULT_SCHEMA_ROOT", "DocumentKind", "SchemaRepository"]
