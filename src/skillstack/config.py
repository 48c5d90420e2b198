# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for skillstack projects."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    FRAGMENT_FILENAME,
    FRAGMENTS_DIR_NAME,
    OUTPUT_DIR_NAME,
    REGISTRY_FILENAME,
    RELATIONSHIPS_FILENAME,
    STACKS_DIR_NAME,
)


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class PathsConfig(BaseModel):
    """Locations of project inputs and outputs, relative to the project root."""

    model_config = ConfigDict(validate_assignment=True)

    fragments: Path = Path(FRAGMENTS_DIR_NAME)
    registry: Path = Path(REGISTRY_FILENAME)
    relationships: Path = Path(RELATIONSHIPS_FILENAME)
    stacks: Path = Path(STACKS_DIR_NAME)
    output: Path = Path(OUTPUT_DIR_NAME)


class CompileConfig(BaseModel):
    """Compilation behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    jobs: int = Field(default_factory=default_parallel_jobs, ge=1)
    fragment_filename: str = FRAGMENT_FILENAME
    package_standalone: bool = True
    write_report: bool = True
    clean_output: bool = False


class OutputConfig(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True)

    emoji: bool = True
    color: bool = True
    verbose: bool = False


class SkillstackConfig(BaseModel):
    """Top-level configuration object."""

    model_config = ConfigDict(validate_assignment=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    compile: CompileConfig = Field(default_factory=CompileConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the configuration."""

        return self.model_dump(mode="json")

    def project_paths(self, root: Path) -> ProjectPaths:
        """Return the configured paths anchored at ``root``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else root / path

        return ProjectPaths(
            root=root,
            fragments=_anchor(self.paths.fragments),
            registry=_anchor(self.paths.registry),
            relationships=_anchor(self.paths.relationships),
            stacks=_anchor(self.paths.stacks),
            output=_anchor(self.paths.output),
        )


@dataclass(frozen=True, slots=True)
class ProjectPaths:
    """Absolute project locations used for one run."""

    root: Path
    fragments: Path
    registry: Path
    relationships: Path
    stacks: Path
    output: Path


__all__ = [
    "CompileConfig",
    "OutputConfig",
    "PathsConfig",
    "ProjectPaths",
    "SkillstackConfig",
    "default_parallel_jobs",
]
