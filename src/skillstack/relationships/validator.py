# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validate fragment selections against the declared compatibility graph."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..errors import ConflictError, MissingDependencyError
from .models import (
    Advisory,
    Cardinality,
    RelationshipKind,
    RelationshipRule,
    Suggestion,
    ValidationOutcome,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RelationshipValidator:
    """Check a selection of canonical ids against relationship rules.

    Rules are evaluated in declaration order and the ids touched by a rule
    are visited in sorted order, so the first violation reported for a given
    selection never depends on the order the stack listed its fragments in.
    """

    rules: tuple[RelationshipRule, ...]

    def validate(self, selection: Mapping[str, str]) -> ValidationOutcome:
        """Validate ``selection`` and collect non-blocking feedback.

        Args:
            selection: Mapping of canonical id to the reference string the
                stack used for it.

        Returns:
            ValidationOutcome: Advisories and suggestions for the selection.

        Raises:
            ConflictError: If two mutually exclusive fragments are selected.
            MissingDependencyError: If a required companion is missing.
        """

        selected = frozenset(selection)
        for rule in self.rules:
            if rule.kind is RelationshipKind.CONFLICT:
                self._check_conflict(rule, selection, selected)
        for rule in self.rules:
            if rule.kind is RelationshipKind.REQUIRES:
                self._check_requirement(rule, selection, selected)

        advisories: list[Advisory] = []
        suggestions: list[Suggestion] = []
        for rule in self.rules:
            present = sorted(rule.subjects & selected)
            if not present:
                continue
            match rule.kind:
                case RelationshipKind.RECOMMENDS:
                    advisories.extend(self._recommendations(rule, present, selection, selected))
                case RelationshipKind.DISCOURAGES:
                    advisories.extend(self._discouragements(rule, present, selection, selected))
                case RelationshipKind.ALTERNATIVE:
                    suggestions.extend(self._alternatives(rule, present, selection, selected))
                case RelationshipKind.CONFLICT | RelationshipKind.REQUIRES:
                    continue
        LOGGER.debug(
            "validated %d fragments: %d advisories, %d suggestions",
            len(selected),
            len(advisories),
            len(suggestions),
        )
        return ValidationOutcome(advisories=tuple(advisories), suggestions=tuple(suggestions))

    def conflicts_with_selection(self, canonical_id: str, selected: Iterable[str]) -> bool:
        """Return whether adding ``canonical_id`` would conflict with ``selected``."""

        others = frozenset(selected) - {canonical_id}
        for rule in self.rules:
            if rule.kind is not RelationshipKind.CONFLICT:
                continue
            if canonical_id in rule.subjects and rule.targets & others:
                return True
            if canonical_id in rule.targets and rule.subjects & others:
                return True
        return False

    @staticmethod
    def _check_conflict(rule: RelationshipRule, selection: Mapping[str, str], selected: frozenset[str]) -> None:
        for subject in sorted(rule.subjects & selected):
            for target in sorted((rule.targets & selected) - {subject}):
                raise ConflictError(
                    selection[subject],
                    selection[target],
                    canonical=(subject, target),
                    reason=rule.reason,
                )

    @staticmethod
    def _check_requirement(rule: RelationshipRule, selection: Mapping[str, str], selected: frozenset[str]) -> None:
        for subject in sorted(rule.subjects & selected):
            needed = rule.targets - {subject}
            present = needed & selected
            match rule.cardinality:
                case Cardinality.ALL:
                    satisfied = present == needed
                case Cardinality.ANY:
                    satisfied = bool(present) or not needed
            if not satisfied:
                raise MissingDependencyError(
                    selection[subject],
                    needed,
                    rule.cardinality,
                    reason=rule.reason,
                )

    def _recommendations(
        self,
        rule: RelationshipRule,
        present: list[str],
        selection: Mapping[str, str],
        selected: frozenset[str],
    ) -> list[Advisory]:
        advisories: list[Advisory] = []
        for subject in present:
            missing = sorted(
                target
                for target in rule.targets - selected - {subject}
                if not self.conflicts_with_selection(target, selected)
            )
            if missing:
                advisories.append(
                    Advisory(
                        kind=rule.kind,
                        subject=selection[subject],
                        targets=tuple(missing),
                        reason=rule.reason,
                    ),
                )
        return advisories

    @staticmethod
    def _discouragements(
        rule: RelationshipRule,
        present: list[str],
        selection: Mapping[str, str],
        selected: frozenset[str],
    ) -> list[Advisory]:
        advisories: list[Advisory] = []
        for subject in present:
            chosen = sorted((rule.targets & selected) - {subject})
            if rule.symmetric:
                chosen = [target for target in chosen if target > subject]
            if chosen:
                advisories.append(
                    Advisory(
                        kind=rule.kind,
                        subject=selection[subject],
                        targets=tuple(selection[target] for target in chosen),
                        reason=rule.reason,
                    ),
                )
        return advisories

    @staticmethod
    def _alternatives(
        rule: RelationshipRule,
        present: list[str],
        selection: Mapping[str, str],
        selected: frozenset[str],
    ) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        for subject in present:
            others = sorted(rule.targets - selected - {subject})
            if others:
                suggestions.append(
                    Suggestion(subject=selection[subject], alternatives=tuple(others), purpose=rule.reason),
                )
        return suggestions


__all__ = ["RelationshipValidator"]
