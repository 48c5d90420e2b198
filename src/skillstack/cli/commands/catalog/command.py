# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command listing the scanned fragment catalog."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import box
from rich.table import Table

from ...options import CommonOptions, ConfigOption, NoColorOption, NoEmojiOption, RootOption, VerboseOption
from ..compile.services import load_project_or_exit
from ..resolve.services import load_catalog_or_exit


def list_catalog(
    root: RootOption = Path("."),
    config: ConfigOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Show every catalogued fragment with its alias and legacy path."""

    options = CommonOptions(root=root, config=config, no_emoji=no_emoji, no_color=no_color, verbose=verbose)
    project = load_project_or_exit(options)
    catalog, table = load_catalog_or_exit(project)

    listing = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    listing.add_column("Canonical id", style="cyan", no_wrap=True)
    listing.add_column("Name")
    listing.add_column("Alias")
    listing.add_column("Legacy path")
    listing.add_column("Standalone", justify="center")
    for fragment in catalog:
        listing.add_row(
            fragment.canonical_id,
            fragment.display_name,
            table.reverse_alias(fragment.canonical_id) or "-",
            fragment.legacy_path or "-",
            "yes" if fragment.standalone else "no",
        )
    project.logger.console.print(listing)
    project.logger.ok(f"{len(catalog)} fragments (checksum {catalog.checksum[:12]})")
    raise typer.Exit(code=0)


__all__ = ["list_catalog"]
