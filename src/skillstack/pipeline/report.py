# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run report models and their JSON serialisation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from .states import ConsumerState


class ExitStatus(IntEnum):
    """Process exit codes derived from a run report."""

    OK = 0
    REJECTED = 1
    ABORTED = 2


@dataclass(frozen=True, slots=True)
class ConsumerReport:
    """Outcome of one consumer pipeline."""

    consumer: str
    state: ConsumerState
    diagnostics: tuple[str, ...] = ()
    advisories: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    output: Path | None = None
    fragments: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        """Return whether the consumer reached :attr:`ConsumerState.ACCEPTED`."""

        return self.state is ConsumerState.ACCEPTED


@dataclass(frozen=True, slots=True)
class RunReport:
    """Outcome of compiling every consumer of a stack.

    An aborted report carries the run-fatal diagnostic and never lists
    consumer entries.
    """

    stack: str
    consumers: tuple[ConsumerReport, ...] = ()
    catalog_checksum: str | None = None
    aborted: str | None = None

    @classmethod
    def abort(cls, stack: str, diagnostic: str, *, catalog_checksum: str | None = None) -> RunReport:
        """Return a report for a run stopped before any consumer started."""

        return cls(stack=stack, catalog_checksum=catalog_checksum, aborted=diagnostic)

    @property
    def exit_status(self) -> ExitStatus:
        """Return the process exit status for this report."""

        if self.aborted is not None:
            return ExitStatus.ABORTED
        if all(entry.accepted for entry in self.consumers):
            return ExitStatus.OK
        return ExitStatus.REJECTED

    @property
    def status(self) -> str:
        """Return ``accepted``, ``rejected``, or ``aborted``."""

        match self.exit_status:
            case ExitStatus.ABORTED:
                return "aborted"
            case ExitStatus.REJECTED:
                return "rejected"
            case _:
                return "accepted"

    def entry(self, consumer: str) -> ConsumerReport | None:
        """Return the report entry for ``consumer`` if present."""

        for item in self.consumers:
            if item.consumer == consumer:
                return item
        return None


def serialize_consumer(entry: ConsumerReport) -> dict[str, object]:
    """Return a JSON-compatible payload describing ``entry``."""

    return {
        "consumer": entry.consumer,
        "status": entry.state.value,
        "diagnostics": list(entry.diagnostics),
        "advisories": list(entry.advisories),
        "suggestions": list(entry.suggestions),
        "fragments": list(entry.fragments),
        "output": str(entry.output) if entry.output is not None else None,
    }


def serialize_report(report: RunReport) -> dict[str, object]:
    """Return a JSON-compatible payload describing ``report``."""

    return {
        "stack": report.stack,
        "catalog_checksum": report.catalog_checksum,
        "status": report.status,
        "aborted": report.aborted,
        "consumers": [serialize_consumer(entry) for entry in report.consumers],
    }


def write_json_report(report: RunReport, path: Path) -> None:
    """Write ``report`` to ``path`` as indented JSON.

    Args:
        report: Completed run report to serialise.
        path: Destination path that receives the JSON payload.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(serialize_report(report), indent=2) + "\n", encoding="utf-8")


__all__ = [
    "ConsumerReport",
    "ExitStatus",
    "RunReport",
    "serialize_consumer",
    "serialize_report",
    "write_json_report",
]
