# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Document compilation, structural validation, and fragment packaging."""

from __future__ import annotations

from .document import DocumentCompiler
from .output_validator import missing_markers, structural_lines, validate_document
from .packaging import build_manifest, package_fragments, packaged_name
from .sections import SELF_CHECK_BLOCK

__all__ = [
    "SELF_CHECK_BLOCK",
    "DocumentCompiler",
    "build_manifest",
    "missing_markers",
    "package_fragments",
    "packaged_name",
    "structural_lines",
    "validate_document",
]
