"""Tests for the CodePipeline status source (boto3 client stubbed)."""

from __future__ import annotations

from typing import Any

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from deploycheck.core.errors import StatusQueryError
from deploycheck.models.pipeline import ExecutionStatus
from deploycheck.sources.base import PipelineStatusSource
from deploycheck.sources.codepipeline import CodePipelineStatusSource, parse_pipeline_state


def _client_error(operation: str, code: str = "PipelineNotFoundException") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "not found"}}, operation)


class StubCodePipelineClient:
    """Minimal stand-in for a boto3 codepipeline client."""

    def __init__(self, state: dict[str, Any] | None = None, error: Exception | None = None):
        self._state = state or {}
        self._error = error
        self.calls: list[tuple[str, str]] = []

    def get_pipeline_state(self, name: str) -> dict[str, Any]:
        self.calls.append(("get_pipeline_state", name))
        if self._error:
            raise self._error
        return self._state

    def get_pipeline(self, name: str) -> dict[str, Any]:
        self.calls.append(("get_pipeline", name))
        if self._error:
            raise self._error
        return {"pipeline": {"name": name, "stages": []}}


STATE = {
    "pipelineName": "web",
    "stageStates": [
        {"stageName": "Source", "latestExecution": {"status": "Succeeded"}},
        {"stageName": "Build", "latestExecution": {"status": "InProgress"}},
        {"stageName": "Deploy"},
    ],
}


class TestParsePipelineState:
    def test_maps_stages_in_order(self):
        status = parse_pipeline_state("web", STATE)
        assert [s.stage_name for s in status.stages] == ["Source", "Build", "Deploy"]
        assert status.stages[0].latest_status == ExecutionStatus.SUCCEEDED
        assert status.stages[1].latest_status == ExecutionStatus.IN_PROGRESS

    def test_missing_execution_is_absent(self):
        status = parse_pipeline_state("web", STATE)
        assert status.stages[2].latest_status is None
        assert status.all_succeeded is False

    def test_unrecognised_status_is_unknown(self):
        payload = {"stageStates": [{"stageName": "X", "latestExecution": {"status": "Paused"}}]}
        status = parse_pipeline_state("web", payload)
        assert status.stages[0].latest_status == ExecutionStatus.UNKNOWN
        assert status.all_succeeded is False

    def test_no_stage_states(self):
        status = parse_pipeline_state("web", {})
        assert status.stages == ()


class TestCodePipelineStatusSource:
    def test_satisfies_protocol(self):
        assert isinstance(CodePipelineStatusSource(client=StubCodePipelineClient()), PipelineStatusSource)

    def test_fetch_status(self):
        client = StubCodePipelineClient(state=STATE)
        status = CodePipelineStatusSource(client=client).fetch_status("web")

        assert status.pipeline_id == "web"
        assert len(status.stages) == 3
        assert client.calls == [("get_pipeline_state", "web")]

    def test_client_error_becomes_status_query_error(self):
        client = StubCodePipelineClient(error=_client_error("GetPipelineState"))
        with pytest.raises(StatusQueryError) as excinfo:
            CodePipelineStatusSource(client=client).fetch_status("web")
        assert excinfo.value.pipeline_id == "web"
        assert isinstance(excinfo.value.__cause__, ClientError)

    def test_connection_error_becomes_status_query_error(self):
        error = EndpointConnectionError(endpoint_url="https://codepipeline.invalid")
        client = StubCodePipelineClient(error=error)
        with pytest.raises(StatusQueryError):
            CodePipelineStatusSource(client=client).fetch_status("web")

    def test_describe_pipeline(self):
        client = StubCodePipelineClient()
        pipeline = CodePipelineStatusSource(client=client).describe_pipeline("web")
        assert pipeline["name"] == "web"

    def test_describe_missing_pipeline(self):
        client = StubCodePipelineClient(error=_client_error("GetPipeline"))
        with pytest.raises(StatusQueryError, match="Failed to find pipeline web"):
            CodePipelineStatusSource(client=client).describe_pipeline("web")
