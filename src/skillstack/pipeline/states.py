# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-consumer pipeline state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from ..errors import SkillstackError


class ConsumerState(str, Enum):
    """Enumerate the stages a consumer pipeline passes through."""

    PENDING = "pending"
    RESOLVED = "resolved"
    VALIDATED = "validated"
    COMPILED = "compiled"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def terminal(self) -> bool:
        """Return whether no further transition is allowed."""

        return self in (ConsumerState.ACCEPTED, ConsumerState.REJECTED)


_FORWARD: Final[dict[ConsumerState, ConsumerState]] = {
    ConsumerState.PENDING: ConsumerState.RESOLVED,
    ConsumerState.RESOLVED: ConsumerState.VALIDATED,
    ConsumerState.VALIDATED: ConsumerState.COMPILED,
    ConsumerState.COMPILED: ConsumerState.ACCEPTED,
}


class InvalidTransitionError(SkillstackError):
    """Raised when a pipeline attempts an illegal state transition."""

    def __init__(self, current: ConsumerState, requested: ConsumerState) -> None:
        super().__init__(f"InvalidTransitionError({current.value} -> {requested.value})")
        self.current = current
        self.requested = requested


@dataclass(slots=True)
class ConsumerLifecycle:
    """Track one consumer's state and the transitions it went through."""

    consumer_name: str
    state: ConsumerState = ConsumerState.PENDING
    history: list[ConsumerState] = field(default_factory=lambda: [ConsumerState.PENDING])

    def advance(self, requested: ConsumerState) -> ConsumerState:
        """Move to ``requested`` when it is the next forward stage.

        Raises:
            InvalidTransitionError: If ``requested`` is not the next stage.
        """

        if _FORWARD.get(self.state) is not requested:
            raise InvalidTransitionError(self.state, requested)
        return self._enter(requested)

    def reject(self) -> ConsumerState:
        """Move to :attr:`ConsumerState.REJECTED` from any non-terminal stage.

        Raises:
            InvalidTransitionError: If the pipeline already finished.
        """

        if self.state.terminal:
            raise InvalidTransitionError(self.state, ConsumerState.REJECTED)
        return self._enter(ConsumerState.REJECTED)

    def _enter(self, state: ConsumerState) -> ConsumerState:
        self.state = state
        self.history.append(state)
        return state


__all__ = ["ConsumerLifecycle", "ConsumerState", "InvalidTransitionError"]
