# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Standalone packaging of fragments selected by accepted consumers."""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from ..catalog.models import FragmentMetadata
from ..constants import (
    FRAGMENT_FILENAME,
    PACKAGE_DEFAULT_VERSION,
    PACKAGE_LICENSE,
    PACKAGE_MANIFEST_FILENAME,
    PACKAGE_README_FILENAME,
    PACKAGE_SUPPORTING_DIRS,
    PACKAGE_SUPPORTING_FILES,
    PACKAGED_FRAGMENT_PREFIX,
)

LOGGER = logging.getLogger(__name__)


def packaged_name(fragment: FragmentMetadata) -> str:
    """Return the directory name of the packaged artifact for ``fragment``.

    ``react-framework (@vince)`` becomes ``skill-react-framework-vince``.
    """

    name = f"{PACKAGED_FRAGMENT_PREFIX}{fragment.base_name}"
    if fragment.author_tag:
        name = f"{name}-{fragment.author_tag}"
    return name


def build_manifest(fragment: FragmentMetadata) -> dict[str, object]:
    """Return the ``plugin.json`` payload describing ``fragment``'s package."""

    manifest: dict[str, object] = {
        "name": packaged_name(fragment),
        "version": PACKAGE_DEFAULT_VERSION,
        "license": PACKAGE_LICENSE,
        "description": fragment.description,
    }
    if fragment.author_tag:
        manifest["author"] = {"name": f"@{fragment.author_tag}"}
    return manifest


def render_readme(fragment: FragmentMetadata) -> str:
    """Return the README shipped next to a packaged fragment."""

    lines = [f"# {packaged_name(fragment)}", "", fragment.description, ""]
    if fragment.usage:
        lines.extend(("## Usage", "", f"Use when: {fragment.usage}", ""))
    requires = fragment.relations.requires
    if requires:
        lines.extend((f"**Requires:** {', '.join(requires)}", ""))
    return "\n".join(lines)


def package_fragment(fragment: FragmentMetadata, destination: Path) -> Path:
    """Write one packaged artifact for ``fragment`` beneath ``destination``.

    The fragment file is copied verbatim together with any supporting files
    and directories stored beside it, then a manifest and README are written.

    Returns:
        Path: Location of the packaged fragment file.
    """

    source_dir = fragment.storage_location.parent
    package_dir = destination / packaged_name(fragment)
    package_dir.mkdir(parents=True, exist_ok=True)
    target = package_dir / FRAGMENT_FILENAME
    shutil.copyfile(fragment.storage_location, target)
    for file_name in PACKAGE_SUPPORTING_FILES:
        supporting = source_dir / file_name
        if supporting.is_file():
            shutil.copyfile(supporting, package_dir / file_name)
    for dir_name in PACKAGE_SUPPORTING_DIRS:
        supporting_dir = source_dir / dir_name
        if supporting_dir.is_dir():
            shutil.copytree(supporting_dir, package_dir / dir_name, dirs_exist_ok=True)
    manifest = json.dumps(build_manifest(fragment), indent=2) + "\n"
    (package_dir / PACKAGE_MANIFEST_FILENAME).write_text(manifest, encoding="utf-8")
    (package_dir / PACKAGE_README_FILENAME).write_text(render_readme(fragment), encoding="utf-8")
    LOGGER.debug("packaged %s into %s", fragment.canonical_id, package_dir)
    return target


def package_fragments(fragments: Iterable[FragmentMetadata], destination: Path) -> tuple[Path, ...]:
    """Package each standalone fragment beneath ``destination``.

    Args:
        fragments: Candidate fragments; non-standalone entries are skipped.
        destination: Directory receiving one sub-directory per artifact.

    Returns:
        tuple[Path, ...]: Written fragment file paths in the order given.
    """

    return tuple(package_fragment(fragment, destination) for fragment in fragments if fragment.standalone)


__all__ = ["build_manifest", "package_fragment", "package_fragments", "packaged_name", "render_readme"]
