"""Collaborator protocols consumed by the verification engine.

The engine knows nothing about how a status source authenticates or which
protocol a probe speaks; anything satisfying these Protocols plugs in.

Contract:
- ``PipelineStatusSource.fetch_status`` raises ``StatusQueryError`` when it
  cannot answer. "Still deploying" is an answer, not an error.
- ``HttpProbe.request`` raises ``ProbeError`` on network failure or timeout.
  Any status code, including 5xx, is a response.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from deploycheck.models.pipeline import PipelineStatus, ProbeResponse


@runtime_checkable
class PipelineStatusSource(Protocol):
    """Protocol for pipeline status backends."""

    def fetch_status(self, pipeline_id: str) -> PipelineStatus:
        """Return a fresh snapshot of every stage of *pipeline_id*."""
        ...


@runtime_checkable
class HttpProbe(Protocol):
    """Protocol for endpoint probes."""

    def request(self, address: str) -> ProbeResponse:
        """Issue one request against *address* and return its response."""
        ...
