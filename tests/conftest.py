"""Shared test fixtures for deploycheck."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from deploycheck.config import VerifySettings
from deploycheck.core.orchestrator import VerificationOrchestrator
from deploycheck.models.pipeline import PipelineStatus, ProbeResponse
from deploycheck.models.policy import RetryPolicy
from deploycheck.sources.scripted import ScriptedProbe, StaticStatusSource, snapshot


class RecordingSleeper:
    """Sleeper that records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleeper:
    """Provide a sleeper that never blocks."""
    return RecordingSleeper()


@pytest.fixture
def settings() -> VerifySettings:
    """Provide settings isolated from the environment and any .env file."""
    return VerifySettings(_env_file=None, overall_timeout_seconds=None)


@pytest.fixture
def pipeline_id() -> str:
    """Provide a deterministic test pipeline name."""
    return "web-app-pipeline"


@pytest.fixture
def address() -> str:
    return "203.0.113.10"


@pytest.fixture
def policy() -> RetryPolicy:
    """Five attempts, ten seconds apart (sleeps are recorded, not real)."""
    return RetryPolicy(max_attempts=5, interval_seconds=10.0)


@pytest.fixture
def succeeded_snapshot(pipeline_id: str) -> PipelineStatus:
    return snapshot(pipeline_id, "Succeeded", "Succeeded", "Succeeded")


@pytest.fixture
def in_progress_snapshot(pipeline_id: str) -> PipelineStatus:
    return snapshot(pipeline_id, "Succeeded", "InProgress", None)


# ---------------------------------------------------------------------------
# Collaborator factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_source() -> Callable[..., StaticStatusSource]:
    """Factory fixture: build a StaticStatusSource from a script."""

    def _factory(*items: PipelineStatus | Exception) -> StaticStatusSource:
        return StaticStatusSource(list(items))

    return _factory


@pytest.fixture
def make_probe() -> Callable[..., ScriptedProbe]:
    """Factory fixture: build a ScriptedProbe from status codes, responses or errors."""

    def _factory(*items: int | ProbeResponse | Exception, body: str = "") -> ScriptedProbe:
        script: Sequence[ProbeResponse | Exception] = [
            ProbeResponse(status_code=item, body=body) if isinstance(item, int) else item
            for item in items
        ]
        return ScriptedProbe(script)

    return _factory


@pytest.fixture
def make_orchestrator(
    sleeper: RecordingSleeper, settings: VerifySettings
) -> Callable[..., VerificationOrchestrator]:
    """Factory fixture: wire an orchestrator to scripted collaborators."""

    def _factory(source, probe) -> VerificationOrchestrator:
        return VerificationOrchestrator(source, probe, sleeper=sleeper, settings=settings)

    return _factory
