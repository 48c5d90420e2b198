# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run every consumer pipeline of a stack and collect the run report."""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from ..catalog.models import Catalog, FragmentMetadata
from ..catalog.scanner import CatalogScanner
from ..catalog.schema import SchemaRepository
from ..compiler.document import DocumentCompiler
from ..compiler.output_validator import validate_document
from ..compiler.packaging import package_fragments
from ..config import ProjectPaths
from ..constants import FRAGMENT_FILENAME, PACKAGED_FRAGMENTS_DIR_NAME, REPORT_FILENAME, STACK_DOCUMENT_SUFFIXES
from ..consumers.merger import merge_from_registry
from ..consumers.models import StackDocument, StackSelection
from ..consumers.registry import ConsumerRegistry, load_registry
from ..consumers.stack import find_stack_document, load_stack
from ..errors import CatalogError, ConsumerError
from ..relationships.loader import RelationshipLoader
from ..relationships.models import Declarations
from ..relationships.validator import RelationshipValidator
from ..resolution.resolver import ResolutionTable
from .report import ConsumerReport, RunReport, write_json_report
from .states import ConsumerLifecycle, ConsumerState

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunEnvironment:
    """Immutable inputs shared by every consumer pipeline of a run."""

    paths: ProjectPaths
    catalog: Catalog
    declarations: Declarations
    table: ResolutionTable
    registry: ConsumerRegistry
    stack: StackDocument
    validator: RelationshipValidator = field(init=False)
    compiler: DocumentCompiler = field(init=False)

    def __post_init__(self) -> None:
        """Derive the validator and compiler from the loaded declarations."""

        object.__setattr__(self, "validator", RelationshipValidator(self.declarations.rules))
        object.__setattr__(self, "compiler", DocumentCompiler(self.catalog))


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Behavioural switches for a stack run."""

    jobs: int = 1
    fragment_filename: str = FRAGMENT_FILENAME
    write_outputs: bool = True
    write_report: bool = True
    package_standalone: bool = True
    clean_output: bool = False


def build_catalog(paths: ProjectPaths, *, fragment_filename: str = FRAGMENT_FILENAME) -> Catalog:
    """Scan the fragment tree configured by ``paths``."""

    return CatalogScanner(paths.fragments, fragment_filename=fragment_filename).scan()


def build_environment(
    paths: ProjectPaths,
    stack: str,
    *,
    fragment_filename: str = FRAGMENT_FILENAME,
    schemas: SchemaRepository | None = None,
) -> RunEnvironment:
    """Scan the catalog and load every declaration before any pipeline starts.

    Args:
        paths: Project locations.
        stack: Stack name (or stack document path) to load.
        fragment_filename: File name identifying fragment files.
        schemas: Schema repository used for document validation.

    Returns:
        RunEnvironment: Frozen environment shared by all pipelines.

    Raises:
        CatalogError: If the catalog or any declaration document is invalid.
    """

    repository = schemas or SchemaRepository.load()
    catalog = build_catalog(paths, fragment_filename=fragment_filename)
    declarations, table = RelationshipLoader(catalog, repository).load(paths.relationships)
    registry = load_registry(paths.registry, repository)
    stack_document = load_stack(find_stack_document(paths.stacks, stack, root=paths.root), repository)
    LOGGER.debug(
        "environment ready: %d fragments, %d rules, %d consumers",
        len(catalog),
        len(declarations.rules),
        len(stack_document.selections),
    )
    return RunEnvironment(
        paths=paths,
        catalog=catalog,
        declarations=declarations,
        table=table,
        registry=registry,
        stack=stack_document,
    )


def run_consumer(
    environment: RunEnvironment,
    selection: StackSelection,
    *,
    output_dir: Path | None = None,
) -> ConsumerReport:
    """Run the pipeline for one consumer and return its report entry.

    Consumer-scoped errors are captured into the entry. Any other exception,
    including filesystem errors while writing, propagates to the caller.

    Args:
        environment: Shared run environment.
        selection: Stack selection for the consumer.
        output_dir: Directory receiving ``<consumer>.md``; ``None`` skips
            writing.

    Returns:
        ConsumerReport: Final state with diagnostics, advisories, and
        suggestions.
    """

    lifecycle = ConsumerLifecycle(selection.consumer_name)
    advisories: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    fragments: tuple[str, ...] = ()
    try:
        resolved = merge_from_registry(environment.registry, selection, environment.table)
        fragments = tuple(fragment.canonical_id for fragment in resolved.fragments)
        lifecycle.advance(ConsumerState.RESOLVED)
        outcome = environment.validator.validate(resolved.selection())
        advisories = tuple(advisory.message for advisory in outcome.advisories)
        suggestions = tuple(suggestion.message for suggestion in outcome.suggestions)
        lifecycle.advance(ConsumerState.VALIDATED)
        document = environment.compiler.compile(resolved)
        lifecycle.advance(ConsumerState.COMPILED)
        validate_document(document)
        lifecycle.advance(ConsumerState.ACCEPTED)
    except ConsumerError as exc:
        lifecycle.reject()
        LOGGER.debug("consumer %s rejected: %s", selection.consumer_name, exc.diagnostic)
        return ConsumerReport(
            consumer=selection.consumer_name,
            state=lifecycle.state,
            diagnostics=(exc.diagnostic,),
            advisories=advisories,
            suggestions=suggestions,
            fragments=fragments,
        )

    output: Path | None = None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        output = output_dir / f"{document.consumer_name}.md"
        output.write_text(document.text, encoding="utf-8")
    LOGGER.debug("consumer %s accepted", selection.consumer_name)
    return ConsumerReport(
        consumer=selection.consumer_name,
        state=lifecycle.state,
        advisories=advisories,
        suggestions=suggestions,
        output=output,
        fragments=fragments,
    )


def stack_key(stack: str) -> str:
    """Return the identifier used for ``stack`` in reports and output paths.

    Only a stack document suffix is stripped, so ``web.prod`` and ``web`` keep
    distinct keys while ``stacks/web.yaml`` maps to ``web``.
    """

    path = Path(stack)
    if path.suffix in STACK_DOCUMENT_SUFFIXES:
        return path.stem
    return stack


def run_stack(
    paths: ProjectPaths,
    stack: str,
    options: RunOptions | None = None,
    *,
    schemas: SchemaRepository | None = None,
) -> RunReport:
    """Compile every consumer of ``stack`` and return the run report.

    A catalog or declaration error aborts the run before any pipeline starts;
    the report then lists no consumers. Otherwise each consumer runs in its
    own pipeline and entries are reported in stack-declared order.

    Args:
        paths: Project locations.
        stack: Stack name or stack document path.
        options: Run behaviour; defaults to :class:`RunOptions`.
        schemas: Schema repository used for document validation.

    Returns:
        RunReport: Outcome of the run.
    """

    opts = options or RunOptions()
    key = stack_key(stack)
    stack_dir = paths.output / key
    if opts.clean_output and opts.write_outputs and stack_dir.is_dir():
        shutil.rmtree(stack_dir)

    try:
        environment = build_environment(paths, stack, fragment_filename=opts.fragment_filename, schemas=schemas)
    except CatalogError as exc:
        LOGGER.debug("run aborted: %s", exc)
        report = RunReport.abort(key, str(exc))
        if opts.write_report:
            write_json_report(report, stack_dir / REPORT_FILENAME)
        return report

    output_dir = stack_dir if opts.write_outputs else None
    entries = _run_pipelines(environment, output_dir=output_dir, jobs=opts.jobs)
    report = RunReport(stack=key, consumers=entries, catalog_checksum=environment.catalog.checksum)

    if opts.write_outputs and opts.package_standalone:
        package_fragments(
            _accepted_fragments(environment.catalog, entries),
            stack_dir / PACKAGED_FRAGMENTS_DIR_NAME,
        )
    if opts.write_report:
        write_json_report(report, stack_dir / REPORT_FILENAME)
    return report


def _run_pipelines(
    environment: RunEnvironment,
    *,
    output_dir: Path | None,
    jobs: int,
) -> tuple[ConsumerReport, ...]:
    selections = environment.stack.selections
    runner = partial(run_consumer, environment, output_dir=output_dir)
    results: dict[int, ConsumerReport] = {}
    if jobs <= 1 or len(selections) <= 1:
        for index, selection in enumerate(selections):
            results[index] = runner(selection)
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            future_map = {executor.submit(runner, selection): index for index, selection in enumerate(selections)}
            for future in as_completed(future_map):
                results[future_map[future]] = future.result()
    return tuple(results[index] for index in range(len(selections)))


def _accepted_fragments(catalog: Catalog, entries: tuple[ConsumerReport, ...]) -> list[FragmentMetadata]:
    seen: dict[str, FragmentMetadata] = {}
    for entry in entries:
        if not entry.accepted:
            continue
        for canonical_id in entry.fragments:
            fragment = catalog.get(canonical_id)
            if fragment is not None:
                seen.setdefault(canonical_id, fragment)
    return list(seen.values())


__all__ = [
    "RunEnvironment",
    "RunOptions",
    "build_catalog",
    "build_environment",
    "run_consumer",
    "run_stack",
    "stack_key",
]
