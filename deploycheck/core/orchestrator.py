"""Verification orchestrator — the single entry point for a run.

Runs the stage-aggregation poller to completion and, only if the pipeline
succeeded, the endpoint poller. Every run ends in exactly one of
``Verified``, ``PipelineFailed`` or ``EndpointFailed``; collaborator
failures and deadline expiry are folded into that same outcome shape so
callers handle one result type.

All per-run objects (pollers, state machine, deadline) are created inside
``verify``; the orchestrator itself holds only collaborators, so runs on
different threads do not share mutable state.
"""

from __future__ import annotations

import logging

from deploycheck.config import VerifySettings
from deploycheck.core.endpoint_poller import EndpointPoller
from deploycheck.core.errors import DeadlineExceeded, StatusQueryError
from deploycheck.core.predicates import ValidationPredicate
from deploycheck.core.stage_poller import StagePoller
from deploycheck.core.timing import BlockingSleeper, Deadline, Sleeper
from deploycheck.core.verification_machine import VerificationMachine
from deploycheck.models.outcomes import PollOutcome
from deploycheck.models.policy import RetryPolicy
from deploycheck.models.verification import VerificationOutcome, VerificationState
from deploycheck.sources.base import HttpProbe, PipelineStatusSource

logger = logging.getLogger(__name__)


class VerificationOrchestrator:
    """Two-phase deployment verification.

    Parameters
    ----------
    source:
        Pipeline status collaborator.
    probe:
        Endpoint request collaborator.
    sleeper:
        Used between attempts when no overall timeout is requested.
        Defaults to ``BlockingSleeper``.
    settings:
        Supplies defaults for ``fail_fast`` and the overall timeout.
    """

    def __init__(
        self,
        source: PipelineStatusSource,
        probe: HttpProbe,
        *,
        sleeper: Sleeper | None = None,
        settings: VerifySettings | None = None,
    ) -> None:
        self.source = source
        self.probe = probe
        self._sleeper = sleeper or BlockingSleeper()
        self._settings = settings or VerifySettings()

    @classmethod
    def from_settings(cls, settings: VerifySettings | None = None) -> VerificationOrchestrator:
        """Build an orchestrator wired to AWS CodePipeline and httpx."""
        from deploycheck.sources.codepipeline import CodePipelineStatusSource
        from deploycheck.sources.http import HttpxProbe

        settings = settings or VerifySettings()
        return cls(
            CodePipelineStatusSource(region=settings.aws_region),
            HttpxProbe(timeout=settings.probe_timeout_seconds),
            settings=settings,
        )

    def close(self) -> None:
        """Release collaborator resources (e.g. the probe's connection pool)."""
        for collaborator in (self.probe, self.source):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> VerificationOrchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def verify(
        self,
        pipeline_id: str,
        address: str,
        pipeline_policy: RetryPolicy,
        endpoint_policy: RetryPolicy,
        predicate: ValidationPredicate,
        *,
        timeout: float | None = None,
        fail_fast: bool | None = None,
    ) -> VerificationOutcome:
        """Verify that *pipeline_id* deployed and *address* serves as expected.

        Parameters
        ----------
        timeout:
            Overall wall-clock bound in seconds. Defaults to
            ``settings.overall_timeout_seconds``; ``None`` leaves the retry
            budgets as the only bound.
        fail_fast:
            Stop pipeline polling on the first terminal-failure stage.
            Defaults to ``settings.fail_fast_on_stage_failure``.

        Returns the run's ``VerificationOutcome``; never raises for runtime
        failures of the collaborators.
        """
        if not callable(predicate):
            raise TypeError("predicate must be callable")

        if timeout is None:
            timeout = self._settings.overall_timeout_seconds
        if fail_fast is None:
            fail_fast = self._settings.fail_fast_on_stage_failure
        sleeper: Sleeper = Deadline(timeout) if timeout is not None else self._sleeper

        machine = VerificationMachine()
        machine.transition(VerificationState.POLLING_PIPELINE, "run started")
        logger.info("Verifying deployment of pipeline %s", pipeline_id)

        # 1. Pipeline phase
        stage_poller = StagePoller(
            self.source, pipeline_policy, sleeper=sleeper, fail_fast=fail_fast
        )
        pipeline_outcome = self._poll_pipeline(stage_poller, pipeline_id)

        if not pipeline_outcome.succeeded:
            detail = self._pipeline_detail(pipeline_outcome)
            machine.transition(VerificationState.PIPELINE_FAILED, pipeline_outcome.reason)
            logger.error("Pipeline %s failed verification: %s", pipeline_id, detail)
            return self._finish(
                machine, pipeline_id, address, pipeline_outcome, None, detail
            )

        machine.transition(
            VerificationState.POLLING_ENDPOINT,
            f"all stages succeeded after {pipeline_outcome.attempts} attempt(s)",
        )

        # 2. Endpoint phase
        endpoint_poller = EndpointPoller(
            self.probe, endpoint_policy, predicate, sleeper=sleeper
        )
        endpoint_outcome = self._poll_endpoint(endpoint_poller, address)

        if not endpoint_outcome.succeeded:
            detail = self._endpoint_detail(endpoint_outcome)
            machine.transition(VerificationState.ENDPOINT_FAILED, endpoint_outcome.reason)
            logger.error("Endpoint %s failed verification: %s", address, detail)
            return self._finish(
                machine, pipeline_id, address, pipeline_outcome, endpoint_outcome, detail
            )

        machine.transition(
            VerificationState.VERIFIED,
            f"endpoint validated after {endpoint_outcome.attempts} attempt(s)",
        )
        logger.info("Deployment of pipeline %s verified at %s", pipeline_id, address)
        return self._finish(
            machine, pipeline_id, address, pipeline_outcome, endpoint_outcome, ""
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    @staticmethod
    def _poll_pipeline(poller: StagePoller, pipeline_id: str) -> PollOutcome:
        try:
            return poller.poll(pipeline_id)
        except StatusQueryError as exc:
            return PollOutcome.failed_terminal(
                f"status query failed: {exc}",
                exc.attempts or poller.attempts,
                last_status=poller.last_status,
                last_error=str(exc),
            )
        except DeadlineExceeded as exc:
            return PollOutcome.timed_out(
                poller.attempts,
                reason=str(exc),
                last_status=poller.last_status,
                deadline_exceeded=True,
            )

    @staticmethod
    def _poll_endpoint(poller: EndpointPoller, address: str) -> PollOutcome:
        try:
            return poller.poll(address)
        except DeadlineExceeded as exc:
            return PollOutcome.timed_out(
                poller.attempts,
                reason=str(exc),
                last_response=poller.last_response,
                last_error=poller.last_error,
                deadline_exceeded=True,
            )
        except Exception as exc:
            # Anything other than ProbeError means the probe itself is broken
            logger.error("Probe for %s failed fatally: %s", address, exc)
            return PollOutcome.failed_terminal(
                f"probe failed: {type(exc).__name__}: {exc}",
                poller.attempts,
                last_response=poller.last_response,
                last_error=str(exc),
            )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @staticmethod
    def _pipeline_detail(outcome: PollOutcome) -> str:
        parts = [f"{outcome.reason} (attempts: {outcome.attempts})"]
        if outcome.last_status is not None:
            parts.append(f"last stage states: {outcome.last_status.describe()}")
        return "; ".join(parts)

    @staticmethod
    def _endpoint_detail(outcome: PollOutcome) -> str:
        parts = [f"{outcome.reason} (attempts: {outcome.attempts})"]
        if outcome.last_response is not None:
            parts.append(
                f"last response: {outcome.last_response.status_code} "
                f"{outcome.last_response.snippet()!r}"
            )
        if outcome.last_error:
            parts.append(f"last error: {outcome.last_error}")
        return "; ".join(parts)

    @staticmethod
    def _finish(
        machine: VerificationMachine,
        pipeline_id: str,
        address: str,
        pipeline: PollOutcome | None,
        endpoint: PollOutcome | None,
        detail: str,
    ) -> VerificationOutcome:
        return VerificationOutcome(
            state=machine.state,
            pipeline_id=pipeline_id,
            address=address,
            pipeline=pipeline,
            endpoint=endpoint,
            transitions=machine.history,
            detail=detail,
        )
