# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command validating a stack without writing output."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...options import (
    CommonOptions,
    ConfigOption,
    JobsOption,
    NoColorOption,
    NoEmojiOption,
    RootOption,
    VerboseOption,
)
from ..compile.services import execute_stack


def validate_stack(
    stack: Annotated[str, typer.Argument(help="Stack name or path to a stack document.")],
    root: RootOption = Path("."),
    config: ConfigOption = None,
    jobs: JobsOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Run every pipeline stage for STACK without writing any file."""

    options = CommonOptions(
        root=root,
        config=config,
        jobs=jobs,
        no_emoji=no_emoji,
        no_color=no_color,
        verbose=verbose,
    )
    execute_stack(options, stack, write=False)


__all__ = ["validate_stack"]
