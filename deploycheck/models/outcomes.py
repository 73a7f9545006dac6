"""Poll outcomes — the only thing a poller hands back to its caller."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from deploycheck.models.pipeline import PipelineStatus, ProbeResponse


class PollResult(str, Enum):
    """Tag of a finished polling run."""

    SUCCEEDED = "succeeded"
    FAILED_TERMINAL = "failed_terminal"
    TIMED_OUT = "timed_out"


class PollOutcome(BaseModel):
    """Result of one polling run plus whatever was last observed.

    Exactly one of the three ``PollResult`` tags; no partial state escapes
    a poller. ``last_status`` is filled by the stage poller,
    ``last_response``/``last_error`` by the endpoint poller.
    """

    model_config = ConfigDict(frozen=True)

    result: PollResult
    attempts: int
    reason: str = ""
    last_status: PipelineStatus | None = None
    last_response: ProbeResponse | None = None
    last_error: str | None = None
    deadline_exceeded: bool = False

    @property
    def succeeded(self) -> bool:
        return self.result == PollResult.SUCCEEDED

    @classmethod
    def succeeded_after(cls, attempts: int, **observed: object) -> PollOutcome:
        return cls(result=PollResult.SUCCEEDED, attempts=attempts, **observed)

    @classmethod
    def failed_terminal(
        cls, reason: str, attempts: int, **observed: object
    ) -> PollOutcome:
        return cls(
            result=PollResult.FAILED_TERMINAL,
            attempts=attempts,
            reason=reason,
            **observed,
        )

    @classmethod
    def timed_out(cls, attempts: int, reason: str = "", **observed: object) -> PollOutcome:
        return cls(
            result=PollResult.TIMED_OUT,
            attempts=attempts,
            reason=reason or f"gave up after {attempts} attempt(s)",
            **observed,
        )
