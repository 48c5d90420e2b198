# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Service helpers for the resolve and catalog commands."""

from __future__ import annotations

import typer

from ....catalog.models import Catalog
from ....catalog.scanner import CatalogScanner
from ....errors import CatalogError
from ....relationships.loader import RelationshipLoader
from ....resolution.resolver import ResolutionTable
from ...options import ProjectContext


def load_catalog_or_exit(project: ProjectContext) -> tuple[Catalog, ResolutionTable]:
    """Scan the catalog and build the resolution table for ``project``.

    Raises:
        typer.Exit: With code ``2`` when the catalog or declarations are invalid.
    """

    try:
        catalog = CatalogScanner(
            project.paths.fragments,
            fragment_filename=project.config.compile.fragment_filename,
        ).scan()
        _, table = RelationshipLoader(catalog).load(project.paths.relationships)
    except CatalogError as exc:
        project.logger.fail(str(exc))
        raise typer.Exit(code=2) from exc
    return catalog, table


__all__ = ["load_catalog_or_exit"]
