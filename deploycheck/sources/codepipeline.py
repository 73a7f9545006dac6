"""AWS CodePipeline status source backed by boto3.

Reads ``get_pipeline_state`` and maps every stage's latest execution
status onto ``StageState``. A stage without ``latestExecution`` has never
run and is reported with ``latest_status=None``.

``describe_pipeline`` wraps ``get_pipeline`` and is the pre-flight
existence check callers run before ``verify``: a missing or misnamed
pipeline fails there with ``StatusQueryError`` instead of surfacing as a
fatal fetch on the first poll.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from deploycheck.core.errors import StatusQueryError
from deploycheck.models.pipeline import ExecutionStatus, PipelineStatus, StageState

logger = logging.getLogger(__name__)


def _parse_status(raw: str | None) -> ExecutionStatus | None:
    if raw is None:
        return None
    try:
        return ExecutionStatus(raw)
    except ValueError:
        logger.warning("Unrecognised stage execution status %r", raw)
        return ExecutionStatus.UNKNOWN


def parse_pipeline_state(pipeline_id: str, payload: dict[str, Any]) -> PipelineStatus:
    """Convert a ``get_pipeline_state`` response into a ``PipelineStatus``."""
    stages: list[StageState] = []
    for stage in payload.get("stageStates", []):
        latest = stage.get("latestExecution") or {}
        stages.append(
            StageState(
                stage_name=stage.get("stageName", "<unnamed>"),
                latest_status=_parse_status(latest.get("status")),
            )
        )
    return PipelineStatus(pipeline_id=pipeline_id, stages=tuple(stages))


class CodePipelineStatusSource:
    """Fetches pipeline snapshots from AWS CodePipeline.

    Parameters
    ----------
    client:
        A boto3 ``codepipeline`` client. Created lazily from *region* when
        not provided.
    region:
        AWS region for the lazily created client.
    """

    def __init__(self, client: Any | None = None, region: str | None = None) -> None:
        self._client = client
        self._region = region

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("codepipeline", region_name=self._region)
        return self._client

    def describe_pipeline(self, pipeline_id: str) -> dict[str, Any]:
        """Return the pipeline declaration; raises if it does not exist."""
        try:
            response = self.client.get_pipeline(name=pipeline_id)
        except (BotoCoreError, ClientError) as exc:
            raise StatusQueryError(
                f"Failed to find pipeline {pipeline_id}: {exc}",
                pipeline_id=pipeline_id,
            ) from exc
        return response.get("pipeline", {})

    def fetch_status(self, pipeline_id: str) -> PipelineStatus:
        try:
            response = self.client.get_pipeline_state(name=pipeline_id)
        except (BotoCoreError, ClientError) as exc:
            raise StatusQueryError(
                f"Failed to read state of pipeline {pipeline_id}: {exc}",
                pipeline_id=pipeline_id,
            ) from exc
        return parse_pipeline_state(pipeline_id, response)
