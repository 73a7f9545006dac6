"""In-memory collaborators that replay a fixed script.

Useful for dry runs and tests: every call consumes the next scripted item;
once the script is exhausted the last item repeats. An item that is an
exception instance is raised (as a copy) instead of returned.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence

from deploycheck.models.pipeline import ExecutionStatus, PipelineStatus, ProbeResponse, StageState


class _Script:
    def __init__(self, items: Sequence[object]) -> None:
        if not items:
            raise ValueError("script must contain at least one item")
        self._items = list(items)
        self.calls = 0

    def next(self) -> object:
        item = self._items[min(self.calls, len(self._items) - 1)]
        self.calls += 1
        if isinstance(item, BaseException):
            # Fresh instance per raise so replays do not chain tracebacks
            raise copy.copy(item)
        return item


class StaticStatusSource:
    """Replays a script of ``PipelineStatus`` snapshots (or errors)."""

    def __init__(self, snapshots: Sequence[PipelineStatus | Exception]) -> None:
        self._script = _Script(snapshots)
        self.requested: list[str] = []

    @property
    def calls(self) -> int:
        return self._script.calls

    def fetch_status(self, pipeline_id: str) -> PipelineStatus:
        self.requested.append(pipeline_id)
        return self._script.next()  # type: ignore[return-value]


class ScriptedProbe:
    """Replays a script of ``ProbeResponse`` values (or errors)."""

    def __init__(self, responses: Sequence[ProbeResponse | Exception]) -> None:
        self._script = _Script(responses)
        self.requested: list[str] = []

    @property
    def calls(self) -> int:
        return self._script.calls

    def request(self, address: str) -> ProbeResponse:
        self.requested.append(address)
        return self._script.next()  # type: ignore[return-value]


def snapshot(
    pipeline_id: str, *statuses: ExecutionStatus | str | None
) -> PipelineStatus:
    """Build a snapshot with stages named ``Stage1..StageN``.

    >>> snapshot("web", "Succeeded", None).describe()
    'Stage1=Succeeded, Stage2=absent'
    """
    stages = tuple(
        StageState(
            stage_name=f"Stage{i}",
            latest_status=ExecutionStatus(s) if s is not None else None,
        )
        for i, s in enumerate(statuses, start=1)
    )
    return PipelineStatus(pipeline_id=pipeline_id, stages=stages)
