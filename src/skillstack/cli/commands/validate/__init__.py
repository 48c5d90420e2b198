# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validate CLI command package."""

from __future__ import annotations

import typer

from .command import validate_stack

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the validate command.

    Args:
        app: Typer application receiving the command registration.
    """

    app.command(name="validate")(validate_stack)
