# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Constants shared across skillstack modules."""

from __future__ import annotations

import re
from typing import Final

FRAGMENT_FILENAME: Final[str] = "SKILL.md"
FRAGMENTS_DIR_NAME: Final[str] = "fragments"
REGISTRY_FILENAME: Final[str] = "consumers.yaml"
RELATIONSHIPS_FILENAME: Final[str] = "relationships.yaml"
STACKS_DIR_NAME: Final[str] = "stacks"
OUTPUT_DIR_NAME: Final[str] = "dist"
CONFIG_FILENAME: Final[str] = "skillstack.toml"
REPORT_FILENAME: Final[str] = "report.json"
PACKAGED_FRAGMENTS_DIR_NAME: Final[str] = "fragments"
STACK_DOCUMENT_SUFFIXES: Final[tuple[str, ...]] = (".yaml", ".yml")

# Lowercase hyphen-separated tokens with an optional ``(@author)`` tag.
CANONICAL_ID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<name>[a-z0-9]+(?:-[a-z0-9]+)*)(?: \(@(?P<author>[a-z0-9][a-z0-9_-]*)\))?$",
)
AUTHOR_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s*\(@(?P<author>[\w-]+)\)\s*$")

PACKAGED_FRAGMENT_PREFIX: Final[str] = "skill-"
PACKAGE_SUPPORTING_FILES: Final[tuple[str, ...]] = ("examples.md", "reference.md")
PACKAGE_SUPPORTING_DIRS: Final[tuple[str, ...]] = ("examples", "scripts")
PACKAGE_MANIFEST_FILENAME: Final[str] = "plugin.json"
PACKAGE_README_FILENAME: Final[str] = "README.md"
PACKAGE_DEFAULT_VERSION: Final[str] = "1.0.0"
PACKAGE_LICENSE: Final[str] = "MIT"
OUTPUT_FORMAT_SECTION: Final[str] = "output-format"

ROLE_MARKER: Final[str] = "<role>"
CONSTRAINTS_MARKER: Final[str] = "<constraints>"
OUTPUT_FORMAT_MARKER: Final[str] = "<output_format>"
REQUIRED_MARKERS: Final[tuple[str, ...]] = (ROLE_MARKER, CONSTRAINTS_MARKER, OUTPUT_FORMAT_MARKER)

SECTION_SEPARATOR: Final[str] = "\n\n---\n\n"

__all__ = [
    "AUTHOR_TAG_PATTERN",
    "CANONICAL_ID_PATTERN",
    "CONFIG_FILENAME",
    "CONSTRAINTS_MARKER",
    "FRAGMENTS_DIR_NAME",
    "FRAGMENT_FILENAME",
    "OUTPUT_DIR_NAME",
    "OUTPUT_FORMAT_MARKER",
    "OUTPUT_FORMAT_SECTION",
    "PACKAGED_FRAGMENTS_DIR_NAME",
    "PACKAGED_FRAGMENT_PREFIX",
    "PACKAGE_DEFAULT_VERSION",
    "PACKAGE_LICENSE",
    "PACKAGE_MANIFEST_FILENAME",
    "PACKAGE_README_FILENAME",
    "PACKAGE_SUPPORTING_DIRS",
    "PACKAGE_SUPPORTING_FILES",
    "REGISTRY_FILENAME",
    "RELATIONSHIPS_FILENAME",
    "REPORT_FILENAME",
    "REQUIRED_MARKERS",
    "ROLE_MARKER",
    "SECTION_SEPARATOR",
    "STACKS_DIR_NAME",
    "STACK_DOCUMENT_SUFFIXES",
]
