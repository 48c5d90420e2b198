# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compile CLI command package."""

from __future__ import annotations

import typer

from .command import compile_stack

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the compile command.

    Args:
        app: Typer application receiving the command registration.
    """

    app.command(name="compile")(compile_stack)
