# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Service helpers shared by the compile and validate commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ....config import SkillstackConfig
from ....pipeline.report import RunReport
from ....pipeline.runner import RunOptions, run_stack
from ...options import CommonOptions, ProjectContext, load_project
from ...shared import CLIError, build_cli_logger


def build_run_options(config: SkillstackConfig, *, write: bool) -> RunOptions:
    """Return pipeline options derived from ``config``.

    Args:
        config: Loaded project configuration.
        write: Whether documents, packaged fragments, and the report are written.

    Returns:
        RunOptions: Options passed to :func:`run_stack`.
    """

    return RunOptions(
        jobs=config.compile.jobs,
        fragment_filename=config.compile.fragment_filename,
        write_outputs=write,
        write_report=write and config.compile.write_report,
        package_standalone=config.compile.package_standalone,
        clean_output=config.compile.clean_output,
    )


def load_project_or_exit(options: CommonOptions) -> ProjectContext:
    """Return the project context or exit after reporting the failure."""

    try:
        return load_project(options)
    except CLIError as exc:
        build_cli_logger(emoji=not options.no_emoji, no_color=options.no_color).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def execute_stack(options: CommonOptions, stack: str, *, write: bool) -> None:
    """Run ``stack``, render the report, and exit with the report status.

    Raises:
        typer.Exit: Always raised with ``0``, ``1``, or ``2``.
    """

    project = load_project_or_exit(options)
    project.logger.debug(f"root={project.paths.root} stack={stack} jobs={project.config.compile.jobs}")
    report = run_stack(project.paths, stack, build_run_options(project.config, write=write))
    render_run_report(report, project, write=write)
    raise typer.Exit(code=int(report.exit_status))


def render_run_report(report: RunReport, project: ProjectContext, *, write: bool) -> None:
    """Print one line per consumer followed by a summary."""

    logger = project.logger
    if report.aborted is not None:
        logger.fail(f"{report.stack}: run aborted")
        logger.echo(f"  {report.aborted}")
        return

    logger.section(f"stack {report.stack}")
    for entry in report.consumers:
        if entry.accepted:
            target = f" -> {_display_path(entry.output, project.paths.root)}" if entry.output else ""
            logger.ok(f"{entry.consumer}: {entry.state.value}{target}")
        else:
            logger.fail(f"{entry.consumer}: {entry.state.value}")
        for diagnostic in entry.diagnostics:
            logger.echo(f"  {diagnostic}")
        for advisory in entry.advisories:
            logger.warn(f"  {advisory}")
        for suggestion in entry.suggestions:
            logger.info(f"  hint: {suggestion}")

    accepted = sum(1 for entry in report.consumers if entry.accepted)
    summary = f"{accepted}/{len(report.consumers)} consumers accepted"
    if write:
        summary = f"{summary}; catalog {report.catalog_checksum[:12] if report.catalog_checksum else '-'}"
    if report.exit_status == 0:
        logger.ok(summary)
    else:
        logger.fail(summary)


def _display_path(path: Path | None, root: Path) -> str:
    if path is None:
        return ""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = ["build_run_options", "execute_stack", "load_project_or_exit", "render_run_report"]
