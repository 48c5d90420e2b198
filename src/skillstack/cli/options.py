# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared CLI options and project loading."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import ProjectPaths, SkillstackConfig
from ..config_loader import ConfigLoader
from ..errors import ConfigError
from .shared import CLIError, CLILogger, build_cli_logger

PACKAGE_LOGGER = logging.getLogger("skillstack")

ROOT_HELP = "Project root containing the fragments, registry, and stacks."
CONFIG_HELP = "Configuration file used instead of skillstack.toml."
OUTPUT_HELP = "Directory receiving compiled output."
JOBS_HELP = "Number of consumer pipelines run in parallel."
NO_EMOJI_HELP = "Disable emoji in console output."
NO_COLOR_HELP = "Disable coloured console output."
VERBOSE_HELP = "Stream debug logging to stderr."

RootOption = Annotated[Path, typer.Option("--root", help=ROOT_HELP, file_okay=False)]
ConfigOption = Annotated[Path | None, typer.Option("--config", help=CONFIG_HELP, dir_okay=False)]
OutputOption = Annotated[Path | None, typer.Option("--output", "-o", help=OUTPUT_HELP, file_okay=False)]
JobsOption = Annotated[int | None, typer.Option("--jobs", "-j", help=JOBS_HELP, min=1)]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help=NO_EMOJI_HELP)]
NoColorOption = Annotated[bool, typer.Option("--no-color", help=NO_COLOR_HELP)]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help=VERBOSE_HELP)]


@dataclass(slots=True)
class CommonOptions:
    """Options accepted by every command."""

    root: Path
    config: Path | None = None
    output: Path | None = None
    jobs: int | None = None
    no_emoji: bool = False
    no_color: bool = False
    verbose: bool = False

    def overrides(self) -> dict[str, Any]:
        """Return the nested configuration mapping supplied on the command line."""

        data: dict[str, Any] = {}
        if self.output is not None:
            data.setdefault("paths", {})["output"] = str(self.output.resolve())
        if self.jobs is not None:
            data.setdefault("compile", {})["jobs"] = self.jobs
        output: dict[str, Any] = {}
        if self.no_emoji:
            output["emoji"] = False
        if self.no_color:
            output["color"] = False
        if self.verbose:
            output["verbose"] = True
        if output:
            data["output"] = output
        return data


@dataclass(slots=True)
class ProjectContext:
    """Configuration, paths, and logger resolved for one command invocation."""

    config: SkillstackConfig
    paths: ProjectPaths
    logger: CLILogger


def load_project(options: CommonOptions) -> ProjectContext:
    """Load configuration for ``options`` and build the command logger.

    Raises:
        CLIError: If configuration loading fails; the exit code is ``2``.
    """

    loader = ConfigLoader.for_root(options.root, project_config=options.config, overrides=options.overrides())
    try:
        config = loader.load()
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=2) from exc
    if config.output.verbose:
        _ensure_verbose_logger()
    logger = build_cli_logger(
        emoji=config.output.emoji,
        debug=config.output.verbose,
        no_color=not config.output.color,
    )
    return ProjectContext(config=config, paths=config.project_paths(loader.project_root), logger=logger)


def _ensure_verbose_logger() -> None:
    """Configure the package logger to stream debug messages to stderr."""

    if getattr(PACKAGE_LOGGER, "_skillstack_verbose_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    PACKAGE_LOGGER.addHandler(handler)
    PACKAGE_LOGGER.setLevel(logging.DEBUG)
    setattr(PACKAGE_LOGGER, "_skillstack_verbose_configured", True)


__all__ = [
    "CommonOptions",
    "ConfigOption",
    "JobsOption",
    "NoColorOption",
    "NoEmojiOption",
    "OutputOption",
    "ProjectContext",
    "RootOption",
    "VerboseOption",
    "load_project",
]
