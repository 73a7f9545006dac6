"""Stage-aggregation poller — waits until every pipeline stage succeeded.

Each attempt fetches a fresh ``PipelineStatus`` snapshot. The aggregate
succeeds only when every stage reports ``Succeeded``; an absent execution
counts as not-yet-succeeded.

By default ``Failed``/``Stopped`` stages are treated like slow ones and the
full retry budget is waited out. With ``fail_fast=True`` a terminal-failure
stage ends the run immediately with ``FailedTerminal``.

Status-fetch failures are never retried: they propagate as
``StatusQueryError`` with the attempt count attached.
"""

from __future__ import annotations

import logging

from deploycheck.core.errors import StatusQueryError
from deploycheck.core.timing import BlockingSleeper, Sleeper
from deploycheck.models.outcomes import PollOutcome
from deploycheck.models.pipeline import PipelineStatus
from deploycheck.models.policy import RetryPolicy
from deploycheck.sources.base import PipelineStatusSource

logger = logging.getLogger(__name__)


class StagePoller:
    """Polls a pipeline status source until all stages succeed.

    Parameters
    ----------
    source:
        Where snapshots come from.
    policy:
        Attempt budget and interval. Never mutated.
    sleeper:
        Suspends the run between attempts. Defaults to ``BlockingSleeper``.
    fail_fast:
        End immediately on a terminal-failure stage instead of waiting
        out the budget.
    """

    def __init__(
        self,
        source: PipelineStatusSource,
        policy: RetryPolicy,
        *,
        sleeper: Sleeper | None = None,
        fail_fast: bool = False,
    ) -> None:
        self._source = source
        self._policy = policy
        self._sleeper = sleeper or BlockingSleeper()
        self._fail_fast = fail_fast
        # Per-run state, reset by poll()
        self.attempts = 0
        self.last_status: PipelineStatus | None = None

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def poll(self, pipeline_id: str) -> PollOutcome:
        """Run the polling loop to completion and return its outcome."""
        self.attempts = 0
        self.last_status = None
        max_attempts = self._policy.max_attempts

        while True:
            self.attempts += 1
            logger.info(
                "Checking pipeline %s status (attempt %d/%d)",
                pipeline_id, self.attempts, max_attempts,
            )
            status = self._fetch(pipeline_id)
            self.last_status = status

            if status.all_succeeded:
                logger.info(
                    "Pipeline %s succeeded after %d attempt(s)",
                    pipeline_id, self.attempts,
                )
                return PollOutcome.succeeded_after(self.attempts, last_status=status)

            if self._fail_fast and status.failed_stages:
                failed = ", ".join(
                    f"{s.stage_name}={s.status_label}" for s in status.failed_stages
                )
                logger.info(
                    "Pipeline %s has terminally failed stages: %s", pipeline_id, failed
                )
                return PollOutcome.failed_terminal(
                    f"stage(s) in terminal failure: {failed}",
                    self.attempts,
                    last_status=status,
                )

            logger.debug("Pipeline %s not ready: %s", pipeline_id, status.describe())

            if self.attempts >= max_attempts:
                logger.info(
                    "Pipeline %s did not succeed within %d attempt(s); last state: %s",
                    pipeline_id, self.attempts, status.describe(),
                )
                return PollOutcome.timed_out(self.attempts, last_status=status)

            self._sleeper.sleep(self._policy.interval_seconds)

    def _fetch(self, pipeline_id: str) -> PipelineStatus:
        try:
            status = self._source.fetch_status(pipeline_id)
            if not isinstance(status, PipelineStatus):
                raise StatusQueryError(
                    f"Status source for pipeline {pipeline_id} returned "
                    f"{type(status).__name__}, not PipelineStatus",
                    pipeline_id=pipeline_id,
                )
            return status
        except StatusQueryError as exc:
            exc.pipeline_id = exc.pipeline_id or pipeline_id
            exc.attempts = self.attempts
            logger.error(
                "Status query for pipeline %s failed on attempt %d: %s",
                pipeline_id, self.attempts, exc,
            )
            raise
        except Exception as exc:
            logger.error(
                "Status query for pipeline %s failed on attempt %d: %s",
                pipeline_id, self.attempts, exc,
            )
            raise StatusQueryError(
                f"Status query for pipeline {pipeline_id} failed: {exc}",
                pipeline_id=pipeline_id,
                attempts=self.attempts,
            ) from exc
