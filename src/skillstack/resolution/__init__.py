# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reference classification and resolution against a scanned catalog."""

from __future__ import annotations

from .references import (
    AliasReference,
    CanonicalReference,
    LegacyPathReference,
    Reference,
    ReferenceForm,
    classify_reference,
    decompose_legacy_path,
)
from .resolver import ResolutionTable, ResolvedReference

__all__ = [
    "AliasReference",
    "CanonicalReference",
    "LegacyPathReference",
    "Reference",
    "ReferenceForm",
    "ResolutionTable",
    "ResolvedReference",
    "classify_reference",
    "decompose_legacy_path",
]
