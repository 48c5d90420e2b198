# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Relationship declarations and the selection validator."""

from __future__ import annotations

from .loader import RelationshipLoader, load_declarations
from .models import (
    Advisory,
    Cardinality,
    Declarations,
    RelationshipKind,
    RelationshipRule,
    Suggestion,
    ValidationOutcome,
)
from .validator import RelationshipValidator

__all__ = [
    "Advisory",
    "Cardinality",
    "Declarations",
    "RelationshipKind",
    "RelationshipLoader",
    "RelationshipRule",
    "RelationshipValidator",
    "Suggestion",
    "ValidationOutcome",
    "load_declarations",
]
