"""Exception hierarchy for deploycheck.

"Not ready yet" is never an exception; it is a ``PollOutcome``. These are
reserved for collaborator failures and programming errors.
"""

from __future__ import annotations


class DeploycheckError(RuntimeError):
    """Base class for all deploycheck errors."""


class StatusQueryError(DeploycheckError):
    """The pipeline status source failed to answer.

    Fatal for the current poller: a connectivity or configuration problem,
    not a transient pipeline state.
    """

    def __init__(
        self,
        message: str,
        *,
        pipeline_id: str = "",
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.pipeline_id = pipeline_id
        self.attempts = attempts


class ProbeError(DeploycheckError):
    """An endpoint request failed before producing a response."""


class DeadlineExceeded(DeploycheckError):
    """The overall wall-clock budget of a run has been spent."""


class InvalidTransitionError(DeploycheckError):
    """Raised when a requested verification state transition is not valid."""
