"""Deploycheck data models — all Pydantic v2, all frozen (immutable)."""

from deploycheck.models.outcomes import PollOutcome, PollResult
from deploycheck.models.pipeline import (
    TERMINAL_FAILURE_STATUSES,
    ExecutionStatus,
    PipelineStatus,
    ProbeResponse,
    StageState,
)
from deploycheck.models.policy import RetryPolicy
from deploycheck.models.verification import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    StateTransition,
    VerificationOutcome,
    VerificationState,
)

__all__ = [
    # pipeline
    "ExecutionStatus",
    "StageState",
    "PipelineStatus",
    "ProbeResponse",
    "TERMINAL_FAILURE_STATUSES",
    # policy
    "RetryPolicy",
    # outcomes
    "PollResult",
    "PollOutcome",
    # verification
    "VerificationState",
    "VerificationOutcome",
    "StateTransition",
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
]
