# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Consumer registry, stack selections, and the assignment merger."""

from __future__ import annotations

from .merger import merge, merge_from_registry
from .models import (
    CompiledDocument,
    ConsumerDefinition,
    ConsumerOverrides,
    FragmentRef,
    ReplaceableField,
    ResolvedConsumer,
    ResolvedFragment,
    Section,
    StackDocument,
    StackSelection,
)
from .registry import ConsumerRegistry, load_registry
from .stack import find_stack_document, list_stacks, load_stack

__all__ = [
    "CompiledDocument",
    "ConsumerDefinition",
    "ConsumerOverrides",
    "ConsumerRegistry",
    "FragmentRef",
    "ReplaceableField",
    "ResolvedConsumer",
    "ResolvedFragment",
    "Section",
    "StackDocument",
    "StackSelection",
    "find_stack_document",
    "list_stacks",
    "load_registry",
    "load_stack",
    "merge",
    "merge_from_registry",
]
