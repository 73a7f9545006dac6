"""Retry policy — the only bound on how long a poller runs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RetryPolicy(BaseModel):
    """How many attempts a poller makes and how long it waits between them.

    Owned by the caller and passed into each poller; pollers never mutate it.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(gt=0)
    interval_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def worst_case_seconds(self) -> float:
        """Total sleep time if every attempt fails (request time excluded)."""
        return (self.max_attempts - 1) * self.interval_seconds
