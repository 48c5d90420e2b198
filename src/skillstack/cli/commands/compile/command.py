# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command compiling every consumer of a stack."""

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
    OutputOption,
    RootOption,
    VerboseOption,
)
from .services import execute_stack


def compile_stack(
    stack: Annotated[str, typer.Argument(help="Stack name or path to a stack document.")],
    root: RootOption = Path("."),
    config: ConfigOption = None,
    output: OutputOption = None,
    jobs: JobsOption = None,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Compile the consumers of STACK and write documents plus report.json.

    Exits with 0 when every consumer is accepted, 1 when any is rejected, and
    2 when the run is aborted.
    """

    options = CommonOptions(
        root=root,
        config=config,
        output=output,
        jobs=jobs,
        no_emoji=no_emoji,
        no_color=no_color,
        verbose=verbose,
    )
    execute_stack(options, stack, write=True)


__all__ = ["compile_stack"]
