# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Assemble compiled documents from resolved consumers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..catalog.io import load_fragment_body
from ..catalog.models import Catalog
from ..consumers.models import CompiledDocument, ResolvedConsumer
from ..errors import UnresolvedReferenceError
from .sections import (
    SELF_CHECK_BLOCK,
    render_constraints,
    render_fragment_index,
    render_front_matter,
    render_inline_fragments,
    render_role,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DocumentCompiler:
    """Concatenate consumer sections in a fixed order.

    The block order is front matter and role, constraints, preloaded fragment
    bodies, the referenced fragment index, and the closing self-check block.
    Output depends only on canonical identifiers and file contents, so a
    fragment named through an alias compiles to the same bytes as one named
    canonically.
    """

    catalog: Catalog

    def compile(self, resolved: ResolvedConsumer) -> CompiledDocument:
        """Return the compiled document for ``resolved``.

        Args:
            resolved: Merged consumer with resolved fragments.

        Returns:
            CompiledDocument: Immutable document text ending with a newline.
        """

        definition = resolved.definition
        bodies = [load_fragment_body(fragment.storage_location) for fragment in resolved.inline_fragments]
        referenced = []
        for fragment in resolved.referenced_fragments:
            metadata = self.catalog.get(fragment.canonical_id)
            if metadata is None:
                raise UnresolvedReferenceError(fragment.reference)
            referenced.append(metadata)

        blocks = [
            render_front_matter(definition),
            render_role(definition),
            render_constraints(definition.allowed_capabilities),
            render_inline_fragments(bodies),
            render_fragment_index(referenced, self.catalog.root),
            SELF_CHECK_BLOCK,
        ]
        text = "\n\n".join(block for block in blocks if block) + "\n"
        LOGGER.debug("compiled %s (%d characters)", definition.name, len(text))
        return CompiledDocument(consumer_name=definition.name, text=text)


__all__ = ["DocumentCompiler"]
