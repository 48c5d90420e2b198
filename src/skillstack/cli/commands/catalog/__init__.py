# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog CLI command package."""

from __future__ import annotations

import typer

from .command import list_catalog

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the catalog command.

    Args:
        app: Typer application receiving the command registration.
    """

    app.command(name="catalog")(list_catalog)
