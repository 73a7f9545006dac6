"""Deterministic verification state machine.

Enforces:
- Valid state transitions only (VALID_TRANSITIONS table)
- Terminal states are final
- Every transition recorded in the run's audit trail
"""

from __future__ import annotations

import logging

from deploycheck.core.errors import InvalidTransitionError
from deploycheck.models.verification import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    StateTransition,
    VerificationState,
)

logger = logging.getLogger(__name__)


class VerificationMachine:
    """Tracks the state of one verification run.

    A fresh machine is created per run; it is never shared.
    """

    def __init__(self) -> None:
        self._state = VerificationState.NOT_STARTED
        self._history: list[StateTransition] = []

    @property
    def state(self) -> VerificationState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def history(self) -> tuple[StateTransition, ...]:
        return tuple(self._history)

    def transition(
        self, target_state: VerificationState, reason: str = ""
    ) -> StateTransition:
        """Move to *target_state*, raising if the move is not allowed."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target_state not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target_state.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )

        record = StateTransition(
            from_state=self._state,
            to_state=target_state,
            reason=reason,
        )
        logger.debug(
            "Verification %s -> %s%s",
            self._state.value, target_state.value, f" ({reason})" if reason else "",
        )
        self._history.append(record)
        self._state = target_state
        return record

    def get_available_transitions(self) -> set[VerificationState]:
        """Return the set of valid target states from the current state."""
        return set(VALID_TRANSITIONS.get(self._state, set()))
