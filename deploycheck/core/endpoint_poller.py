"""Predicate-based endpoint poller.

Each attempt issues one request and hands ``(status_code, body)`` to the
caller's predicate; the predicate alone decides success. A request that
fails outright (``ProbeError``) is just a failed attempt.
"""

from __future__ import annotations

import logging

from deploycheck.core.errors import ProbeError
from deploycheck.core.predicates import ValidationPredicate
from deploycheck.core.timing import BlockingSleeper, Sleeper
from deploycheck.models.outcomes import PollOutcome
from deploycheck.models.pipeline import ProbeResponse
from deploycheck.models.policy import RetryPolicy
from deploycheck.sources.base import HttpProbe

logger = logging.getLogger(__name__)


class EndpointPoller:
    """Polls an endpoint until the validation predicate accepts a response.

    Parameters
    ----------
    probe:
        Issues the requests.
    policy:
        Attempt budget and interval. Never mutated.
    predicate:
        ``(status_code, body) -> bool``; evaluated once per response.
    sleeper:
        Suspends the run between attempts. Defaults to ``BlockingSleeper``.
    """

    def __init__(
        self,
        probe: HttpProbe,
        policy: RetryPolicy,
        predicate: ValidationPredicate,
        *,
        sleeper: Sleeper | None = None,
    ) -> None:
        if not callable(predicate):
            raise TypeError("predicate must be callable")
        self._probe = probe
        self._policy = policy
        self._predicate = predicate
        self._sleeper = sleeper or BlockingSleeper()
        # Per-run state, reset by poll()
        self.attempts = 0
        self.last_response: ProbeResponse | None = None
        self.last_error: str | None = None

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def poll(self, address: str) -> PollOutcome:
        """Run the polling loop to completion and return its outcome."""
        self.attempts = 0
        self.last_response = None
        self.last_error = None
        max_attempts = self._policy.max_attempts

        while True:
            self.attempts += 1
            if self._attempt(address, max_attempts):
                logger.info(
                    "Endpoint %s validated after %d attempt(s)", address, self.attempts
                )
                return PollOutcome.succeeded_after(
                    self.attempts, last_response=self.last_response
                )

            if self.attempts >= max_attempts:
                logger.info(
                    "Endpoint %s did not validate within %d attempt(s)",
                    address, self.attempts,
                )
                return PollOutcome.timed_out(
                    self.attempts,
                    last_response=self.last_response,
                    last_error=self.last_error,
                )

            self._sleeper.sleep(self._policy.interval_seconds)

    def _attempt(self, address: str, max_attempts: int) -> bool:
        try:
            response = self._probe.request(address)
        except ProbeError as exc:
            self.last_error = str(exc)
            logger.warning(
                "Request to %s failed (attempt %d/%d): %s",
                address, self.attempts, max_attempts, exc,
            )
            return False

        self.last_response = response
        self.last_error = None
        logger.info(
            "Endpoint %s returned %d (attempt %d/%d): %s",
            address, response.status_code, self.attempts, max_attempts,
            response.snippet(),
        )

        try:
            return bool(self._predicate(response.status_code, response.body))
        except Exception as exc:
            self.last_error = f"predicate raised {type(exc).__name__}: {exc}"
            logger.warning(
                "Validation predicate raised on attempt %d: %s", self.attempts, exc
            )
            return False
