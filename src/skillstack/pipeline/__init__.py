# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Stack runs: environment barrier, consumer pipelines, and run reports."""

from __future__ import annotations

from .report import ConsumerReport, ExitStatus, RunReport, serialize_report, write_json_report
from .runner import (
    RunEnvironment,
    RunOptions,
    build_catalog,
    build_environment,
    run_consumer,
    run_stack,
    stack_key,
)
from .states import ConsumerLifecycle, ConsumerState, InvalidTransitionError

__all__ = [
    "ConsumerLifecycle",
    "ConsumerReport",
    "ConsumerState",
    "ExitStatus",
    "InvalidTransitionError",
    "RunEnvironment",
    "RunOptions",
    "RunReport",
    "build_catalog",
    "build_environment",
    "run_consumer",
    "run_stack",
    "serialize_report",
    "stack_key",
    "write_json_report",
]
