"""Tests for deploycheck data models — snapshots, policies, outcomes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from deploycheck.models import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ExecutionStatus,
    PipelineStatus,
    PollOutcome,
    PollResult,
    ProbeResponse,
    RetryPolicy,
    StageState,
    VerificationOutcome,
    VerificationState,
)
from deploycheck.sources.scripted import snapshot


class TestStageState:
    def test_succeeded(self):
        stage = StageState(stage_name="Deploy", latest_status=ExecutionStatus.SUCCEEDED)
        assert stage.succeeded is True
        assert stage.terminal_failure is False

    def test_absent_is_not_success(self):
        stage = StageState(stage_name="Deploy")
        assert stage.latest_status is None
        assert stage.succeeded is False
        assert stage.terminal_failure is False
        assert stage.status_label == "absent"

    @pytest.mark.parametrize("status", ["Failed", "Stopped", "Cancelled", "Superseded"])
    def test_terminal_failures(self, status: str):
        stage = StageState(stage_name="Deploy", latest_status=ExecutionStatus(status))
        assert stage.terminal_failure is True

    def test_in_progress_is_not_terminal(self):
        stage = StageState(stage_name="Build", latest_status=ExecutionStatus.IN_PROGRESS)
        assert stage.terminal_failure is False
        assert stage.succeeded is False

    def test_frozen(self):
        stage = StageState(stage_name="Build")
        with pytest.raises(ValidationError):
            stage.stage_name = "Other"  # type: ignore[misc]


class TestPipelineStatus:
    def test_all_succeeded(self):
        assert snapshot("p", "Succeeded", "Succeeded").all_succeeded is True

    def test_one_in_progress(self):
        assert snapshot("p", "Succeeded", "InProgress").all_succeeded is False

    def test_absent_stage_blocks_success(self):
        assert snapshot("p", "Succeeded", None).all_succeeded is False

    def test_empty_pipeline_is_not_success(self):
        assert PipelineStatus(pipeline_id="p").all_succeeded is False

    def test_failed_and_pending_stages(self):
        status = snapshot("p", "Succeeded", "Failed", None)
        assert [s.stage_name for s in status.failed_stages] == ["Stage2"]
        assert [s.stage_name for s in status.pending_stages] == ["Stage2", "Stage3"]

    def test_describe(self):
        assert snapshot("p", "Succeeded", None).describe() == "Stage1=Succeeded, Stage2=absent"
        assert PipelineStatus(pipeline_id="p").describe() == "<no stages>"

    def test_stage_order_preserved(self):
        status = PipelineStatus(
            pipeline_id="p",
            stages=(StageState(stage_name="Source"), StageState(stage_name="Deploy")),
        )
        assert [s.stage_name for s in status.stages] == ["Source", "Deploy"]


class TestProbeResponse:
    def test_snippet_collapses_whitespace(self):
        resp = ProbeResponse(status_code=200, body="<h1>\n  Hello\n</h1>\n")
        assert resp.snippet() == "<h1> Hello </h1>"

    def test_snippet_truncates(self):
        resp = ProbeResponse(status_code=200, body="x" * 200)
        snippet = resp.snippet(limit=20)
        assert len(snippet) == 20
        assert snippet.endswith("...")


class TestRetryPolicy:
    def test_valid(self):
        policy = RetryPolicy(max_attempts=30, interval_seconds=10)
        assert policy.max_attempts == 30
        assert policy.worst_case_seconds == 290

    def test_zero_interval_allowed(self):
        assert RetryPolicy(max_attempts=1).interval_seconds == 0.0

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_max_attempts_must_be_positive(self, attempts: int):
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=attempts)

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=3, interval_seconds=-1)

    def test_frozen(self):
        policy = RetryPolicy(max_attempts=3)
        with pytest.raises(ValidationError):
            policy.max_attempts = 10  # type: ignore[misc]


class TestPollOutcome:
    def test_succeeded_after(self):
        outcome = PollOutcome.succeeded_after(2)
        assert outcome.result == PollResult.SUCCEEDED
        assert outcome.succeeded is True
        assert outcome.attempts == 2

    def test_failed_terminal_carries_reason(self):
        outcome = PollOutcome.failed_terminal("boom", 1)
        assert outcome.result == PollResult.FAILED_TERMINAL
        assert outcome.reason == "boom"
        assert outcome.succeeded is False

    def test_timed_out_default_reason(self):
        outcome = PollOutcome.timed_out(5)
        assert outcome.result == PollResult.TIMED_OUT
        assert outcome.reason == "gave up after 5 attempt(s)"
        assert outcome.deadline_exceeded is False


class TestVerificationModels:
    def test_terminal_states(self):
        assert TERMINAL_STATES == {
            VerificationState.VERIFIED,
            VerificationState.PIPELINE_FAILED,
            VerificationState.ENDPOINT_FAILED,
        }
        for state in TERMINAL_STATES:
            assert VALID_TRANSITIONS[state] == set()

    def test_every_state_has_transition_entry(self):
        assert set(VALID_TRANSITIONS) == set(VerificationState)

    def test_outcome_summary(self):
        outcome = VerificationOutcome(
            state=VerificationState.PIPELINE_FAILED,
            pipeline_id="p",
            address="a",
            pipeline=PollOutcome.timed_out(3),
            detail="gave up",
        )
        summary = outcome.summary()
        assert summary.startswith("pipeline_failed")
        assert "pipeline attempts=3" in summary
        assert "endpoint attempts" not in summary
        assert outcome.verified is False

    def test_outcome_deadline_flag(self):
        outcome = VerificationOutcome(
            state=VerificationState.ENDPOINT_FAILED,
            pipeline_id="p",
            address="a",
            pipeline=PollOutcome.succeeded_after(1),
            endpoint=PollOutcome.timed_out(2, deadline_exceeded=True),
        )
        assert outcome.deadline_exceeded is True
