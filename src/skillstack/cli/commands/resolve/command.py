# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command resolving fragment references."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....errors import UnresolvedReferenceError
from ...options import CommonOptions, ConfigOption, NoColorOption, NoEmojiOption, RootOption, VerboseOption
from ..compile.services import load_project_or_exit
from .services import load_catalog_or_exit


def resolve_references(
    references: Annotated[list[str], typer.Argument(help="Alias, canonical id, or legacy path references.")],
    root: RootOption = Path("."),
    config: ConfigOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Print the canonical id, location, and matched form of each reference.

    Exits with 1 when any reference does not resolve.
    """

    options = CommonOptions(root=root, config=config, no_emoji=no_emoji, no_color=no_color, verbose=verbose)
    project = load_project_or_exit(options)
    catalog, table = load_catalog_or_exit(project)
    logger = project.logger

    unresolved = 0
    for reference in references:
        try:
            resolved = table.resolve(reference)
        except UnresolvedReferenceError as exc:
            unresolved += 1
            logger.fail(exc.diagnostic)
            continue
        location = resolved.storage_location.relative_to(catalog.root).as_posix()
        logger.ok(f"{reference} -> {resolved.canonical_id}")
        logger.echo(f"  form: {resolved.form.value}")
        logger.echo(f"  location: {location}")
        alias = table.reverse_alias(resolved.canonical_id)
        if alias is not None:
            logger.echo(f"  alias: {alias}")
    raise typer.Exit(code=1 if unresolved else 0)


__all__ = ["resolve_references"]
