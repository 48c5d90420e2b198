# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Structural checks applied to compiled documents before acceptance."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from ..constants import REQUIRED_MARKERS
from ..consumers.models import CompiledDocument
from ..errors import IncompleteDocumentError

# Blocks holding fragment content; markers inside them do not count.
_EMBEDDED_BLOCKS: Final[dict[str, str]] = {
    "<preloaded_skills>": "</preloaded_skills>",
    "<available_skills>": "</available_skills>",
}


def structural_lines(text: str) -> frozenset[str]:
    """Return the stripped lines of ``text`` that lie outside embedded fragment blocks."""

    lines: set[str] = set()
    closing: str | None = None
    for line in text.splitlines():
        stripped = line.strip()
        if closing is not None:
            if stripped == closing:
                closing = None
            continue
        closing = _EMBEDDED_BLOCKS.get(stripped)
        if closing is None:
            lines.add(stripped)
    return frozenset(lines)


def missing_markers(document: CompiledDocument, markers: Sequence[str] = REQUIRED_MARKERS) -> tuple[str, ...]:
    """Return every marker absent from ``document`` in declared order.

    A marker counts only when it stands on its own line outside the inlined
    and indexed fragment blocks.
    """

    present = structural_lines(document.text)
    return tuple(marker for marker in markers if marker not in present)


def validate_document(document: CompiledDocument, markers: Sequence[str] = REQUIRED_MARKERS) -> CompiledDocument:
    """Ensure ``document`` contains each required structural marker.

    Args:
        document: Compiled document to check.
        markers: Markers required, in the order they are reported.

    Returns:
        CompiledDocument: ``document`` unchanged.

    Raises:
        IncompleteDocumentError: Naming the first missing marker.
    """

    missing = missing_markers(document, markers)
    if missing:
        raise IncompleteDocumentError(missing[0])
    return document


__all__ = ["missing_markers", "structural_lines", "validate_document"]
