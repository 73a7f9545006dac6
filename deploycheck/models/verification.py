"""Verification run state machine models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from deploycheck.models.outcomes import PollOutcome


class VerificationState(str, Enum):
    """Strict state model for one verification run."""

    NOT_STARTED = "not_started"
    POLLING_PIPELINE = "polling_pipeline"
    POLLING_ENDPOINT = "polling_endpoint"
    VERIFIED = "verified"
    PIPELINE_FAILED = "pipeline_failed"
    ENDPOINT_FAILED = "endpoint_failed"


# Valid state transitions — enforced structurally by VerificationMachine.
# Terminal states have no outgoing transitions.
VALID_TRANSITIONS: dict[VerificationState, set[VerificationState]] = {
    VerificationState.NOT_STARTED: {VerificationState.POLLING_PIPELINE},
    VerificationState.POLLING_PIPELINE: {
        VerificationState.POLLING_ENDPOINT,
        VerificationState.PIPELINE_FAILED,
    },
    VerificationState.POLLING_ENDPOINT: {
        VerificationState.VERIFIED,
        VerificationState.ENDPOINT_FAILED,
    },
    VerificationState.VERIFIED: set(),  # terminal
    VerificationState.PIPELINE_FAILED: set(),  # terminal
    VerificationState.ENDPOINT_FAILED: set(),  # terminal
}

TERMINAL_STATES: frozenset[VerificationState] = frozenset(
    state for state, targets in VALID_TRANSITIONS.items() if not targets
)


class StateTransition(BaseModel):
    """Records a single state transition for the run's audit trail."""

    model_config = ConfigDict(frozen=True)

    from_state: VerificationState
    to_state: VerificationState
    reason: str = ""


class VerificationOutcome(BaseModel):
    """The single verdict of a verification run, with diagnostic detail."""

    model_config = ConfigDict(frozen=True)

    state: VerificationState
    pipeline_id: str
    address: str
    pipeline: PollOutcome | None = None
    endpoint: PollOutcome | None = None
    transitions: tuple[StateTransition, ...] = ()
    detail: str = ""

    @property
    def verified(self) -> bool:
        return self.state == VerificationState.VERIFIED

    @property
    def deadline_exceeded(self) -> bool:
        return any(
            poll is not None and poll.deadline_exceeded
            for poll in (self.pipeline, self.endpoint)
        )

    def summary(self) -> str:
        """One-line human readable verdict."""
        parts = [f"{self.state.value}: pipeline={self.pipeline_id} address={self.address}"]
        if self.pipeline is not None:
            parts.append(f"pipeline attempts={self.pipeline.attempts}")
        if self.endpoint is not None:
            parts.append(f"endpoint attempts={self.endpoint.attempts}")
        if self.detail:
            parts.append(self.detail)
        return "; ".join(parts)
