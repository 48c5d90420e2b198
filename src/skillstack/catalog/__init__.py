# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for the fragment catalog."""

from __future__ import annotations

from .models import Catalog, FragmentMetadata, FragmentRelations, derive_display_name
from .scanner import CatalogScanner
from .schema import DocumentKind, SchemaRepository

__all__ = [
    "Catalog",
    "CatalogScanner",
    "DocumentKind",
    "FragmentMetadata",
    "FragmentRelations",
    "SchemaRepository",
    "derive_display_name",
]
