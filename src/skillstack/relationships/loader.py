# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load aliases and relationship rules from declarations and fragment headers."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

from ..catalog.io import load_yaml_document
from ..catalog.models import Catalog
from ..catalog.schema import DocumentKind, SchemaRepository
from ..catalog.types import JSONValue
from ..catalog.utils import expect_mapping, optional_string, string_array, string_mapping
from ..errors import DeclarationError, UnresolvedReferenceError
from ..resolution.resolver import ResolutionTable
from .models import Cardinality, Declarations, RelationshipKind, RelationshipRule

LOGGER = logging.getLogger(__name__)

_EXCLUSION_SECTIONS: tuple[tuple[str, RelationshipKind], ...] = (
    ("conflicts", RelationshipKind.CONFLICT),
    ("discourages", RelationshipKind.DISCOURAGES),
)


class RelationshipLoader:
    """Build :class:`Declarations` for a scanned catalog.

    Every reference used by a rule is resolved through the run's
    :class:`ResolutionTable`; a reference naming no catalog entry is a
    declaration error reported before any consumer pipeline starts.
    """

    def __init__(self, catalog: Catalog, schemas: SchemaRepository | None = None) -> None:
        self._catalog = catalog
        self._schemas = schemas or SchemaRepository.load()

    def load(self, path: Path | None) -> tuple[Declarations, ResolutionTable]:
        """Load declarations from ``path`` and build the resolution table.

        Args:
            path: Relationship document. ``None`` or a missing file yields an
                empty alias map and only fragment-declared rules.

        Returns:
            tuple[Declarations, ResolutionTable]: Loaded declarations and the
            table built from the catalog and aliases.

        Raises:
            DeclarationError: If the document is invalid or names an unknown
                fragment.
        """

        document: Mapping[str, JSONValue] = {}
        source = "<none>"
        if path is not None and path.is_file():
            source = str(path)
            payload = load_yaml_document(path)
            if payload is None:
                payload = {}
            self._schemas.validate(DocumentKind.RELATIONSHIPS, payload, source=path)
            document = expect_mapping(payload, key="document", context=source)
        elif path is not None:
            LOGGER.debug("relationship document %s not found; using fragment headers only", path)

        aliases = string_mapping(document.get("aliases"), key="aliases", context=source)
        table = ResolutionTable.build(self._catalog, aliases)
        rules = [*self._document_rules(document, table, source), *self._header_rules(table)]
        LOGGER.debug("loaded %d aliases and %d relationship rules", len(aliases), len(rules))
        return Declarations(aliases=MappingProxyType(dict(table.aliases)), rules=tuple(rules)), table

    def _document_rules(
        self,
        document: Mapping[str, JSONValue],
        table: ResolutionTable,
        source: str,
    ) -> list[RelationshipRule]:
        rules: list[RelationshipRule] = []
        for section, kind in _EXCLUSION_SECTIONS:
            for index, entry in enumerate(_entries(document, section, source)):
                context = f"{source}: {section}[{index}]"
                reason = optional_string(entry.get("reason"), key="reason", context=context) or ""
                if "skills" in entry:
                    group = _resolve_all(table, string_array(entry.get("skills"), key="skills", context=context), context)
                    rules.append(
                        RelationshipRule(
                            kind=kind,
                            subjects=group,
                            targets=group,
                            reason=reason,
                            source=context,
                            symmetric=True,
                        ),
                    )
                    continue
                subjects = string_array(entry.get("subjects"), key="subjects", context=context)
                targets = string_array(entry.get("targets"), key="targets", context=context)
                rules.append(
                    RelationshipRule(
                        kind=kind,
                        subjects=_resolve_all(table, subjects, context),
                        targets=_resolve_all(table, targets, context),
                        reason=reason,
                        source=context,
                    ),
                )

        for index, entry in enumerate(_entries(document, "requires", source)):
            context = f"{source}: requires[{index}]"
            subject = _resolve(table, str(entry.get("skill")), context)
            cardinality = Cardinality(optional_string(entry.get("cardinality"), key="cardinality", context=context) or "all")
            rules.append(
                RelationshipRule(
                    kind=RelationshipKind.REQUIRES,
                    subjects=frozenset({subject}),
                    targets=_resolve_all(table, string_array(entry.get("needs"), key="needs", context=context), context),
                    cardinality=cardinality,
                    reason=optional_string(entry.get("reason"), key="reason", context=context) or "",
                    source=context,
                ),
            )

        for index, entry in enumerate(_entries(document, "recommends", source)):
            context = f"{source}: recommends[{index}]"
            rules.append(
                RelationshipRule(
                    kind=RelationshipKind.RECOMMENDS,
                    subjects=frozenset({_resolve(table, str(entry.get("when")), context)}),
                    targets=_resolve_all(table, string_array(entry.get("suggest"), key="suggest", context=context), context),
                    reason=optional_string(entry.get("reason"), key="reason", context=context) or "",
                    source=context,
                ),
            )

        for index, entry in enumerate(_entries(document, "alternatives", source)):
            context = f"{source}: alternatives[{index}]"
            group = _resolve_all(table, string_array(entry.get("skills"), key="skills", context=context), context)
            rules.append(
                RelationshipRule(
                    kind=RelationshipKind.ALTERNATIVE,
                    subjects=group,
                    targets=group,
                    reason=optional_string(entry.get("purpose"), key="purpose", context=context) or "",
                    source=context,
                    symmetric=True,
                ),
            )
        return rules

    def _header_rules(self, table: ResolutionTable) -> list[RelationshipRule]:
        rules: list[RelationshipRule] = []
        for fragment in self._catalog:
            context = str(fragment.storage_location)
            subject = frozenset({fragment.canonical_id})
            relations = fragment.relations
            if relations.requires:
                rules.append(
                    RelationshipRule(
                        kind=RelationshipKind.REQUIRES,
                        subjects=subject,
                        targets=_resolve_all(table, relations.requires, context),
                        source=context,
                    ),
                )
            if relations.conflicts_with:
                rules.append(
                    RelationshipRule(
                        kind=RelationshipKind.CONFLICT,
                        subjects=subject,
                        targets=_resolve_all(table, relations.conflicts_with, context),
                        source=context,
                    ),
                )
            # compatible_with carries no rule but must still name real fragments.
            _resolve_all(table, relations.compatible_with, context)
        return rules


def _entries(document: Mapping[str, JSONValue], section: str, source: str) -> list[Mapping[str, JSONValue]]:
    raw = document.get(section)
    if raw is None:
        return []
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise DeclarationError(f"{source}: expected '{section}' to be an array")
    return [expect_mapping(item, key=f"{section}[{index}]", context=source) for index, item in enumerate(raw)]


def _resolve(table: ResolutionTable, reference: str, context: str) -> str:
    try:
        return table.resolve(reference).canonical_id
    except UnresolvedReferenceError as exc:
        raise DeclarationError(f"{context}: unknown fragment reference '{reference}'") from exc


def _resolve_all(table: ResolutionTable, references: Sequence[str], context: str) -> frozenset[str]:
    return frozenset(_resolve(table, reference, context) for reference in references)


def load_declarations(
    catalog: Catalog,
    path: Path | None,
    schemas: SchemaRepository | None = None,
) -> tuple[Declarations, ResolutionTable]:
    """Convenience wrapper around :meth:`RelationshipLoader.load`."""

    return RelationshipLoader(catalog, schemas).load(path)


__all__ = ["RelationshipLoader", "load_declarations"]
