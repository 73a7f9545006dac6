"""Pipeline snapshot models — what one status query observed."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ExecutionStatus(str, Enum):
    """Latest execution status of a single pipeline stage.

    Values mirror the CodePipeline vocabulary so adapter output maps 1:1.
    """

    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    STOPPED = "Stopped"
    STOPPING = "Stopping"
    SUPERSEDED = "Superseded"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"


# Stages in one of these states will not succeed without a new execution.
TERMINAL_FAILURE_STATUSES: frozenset[ExecutionStatus] = frozenset({
    ExecutionStatus.FAILED,
    ExecutionStatus.STOPPED,
    ExecutionStatus.SUPERSEDED,
    ExecutionStatus.CANCELLED,
})


class StageState(BaseModel):
    """One stage of a pipeline and its latest execution status.

    ``latest_status`` is ``None`` when the stage has never executed.
    """

    model_config = ConfigDict(frozen=True)

    stage_name: str
    latest_status: ExecutionStatus | None = None

    @property
    def succeeded(self) -> bool:
        return self.latest_status == ExecutionStatus.SUCCEEDED

    @property
    def terminal_failure(self) -> bool:
        return self.latest_status in TERMINAL_FAILURE_STATUSES

    @property
    def status_label(self) -> str:
        return self.latest_status.value if self.latest_status else "absent"


class PipelineStatus(BaseModel):
    """An immutable snapshot of every stage of a pipeline, in order."""

    model_config = ConfigDict(frozen=True)

    pipeline_id: str
    stages: tuple[StageState, ...] = ()

    @property
    def all_succeeded(self) -> bool:
        """True only when there is at least one stage and all succeeded."""
        return bool(self.stages) and all(s.succeeded for s in self.stages)

    @property
    def failed_stages(self) -> list[StageState]:
        return [s for s in self.stages if s.terminal_failure]

    @property
    def pending_stages(self) -> list[StageState]:
        return [s for s in self.stages if not s.succeeded]

    def describe(self) -> str:
        """Compact ``name=status`` rendering for log lines."""
        if not self.stages:
            return "<no stages>"
        return ", ".join(f"{s.stage_name}={s.status_label}" for s in self.stages)


class ProbeResponse(BaseModel):
    """Status code and body returned by one endpoint request."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = ""

    def snippet(self, limit: int = 80) -> str:
        """Return the body collapsed to one line and truncated to *limit*."""
        text = " ".join(self.body.split())
        if len(text) <= limit:
            return text
        return text[: limit - 3] + "..."
