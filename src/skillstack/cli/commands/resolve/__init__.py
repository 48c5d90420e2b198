# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve CLI command package."""

from __future__ import annotations

import typer

from .command import resolve_references

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the resolve command.

    Args:
        app: Typer application receiving the command registration.
    """

    app.command(name="resolve")(resolve_references)
