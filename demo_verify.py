"""Dry-run smoke test — drives a full verification with scripted collaborators.

Usage:
    python demo_verify.py
"""

from __future__ import annotations

from deploycheck.config import VerifySettings, configure_logging
from deploycheck.core.orchestrator import VerificationOrchestrator
from deploycheck.core.predicates import expect_response
from deploycheck.models.pipeline import ProbeResponse
from deploycheck.models.policy import RetryPolicy
from deploycheck.reporting.renderer import OutcomeRenderer
from deploycheck.sources.scripted import ScriptedProbe, StaticStatusSource, snapshot

EXPECTED_TEXT = "Your AWS CodePipeline deployment is working."


def main() -> None:
    """Run a scripted deployment through both verification phases."""
    settings = VerifySettings()
    configure_logging(settings)

    source = StaticStatusSource([
        snapshot("demo-pipeline", "InProgress", None, None),
        snapshot("demo-pipeline", "Succeeded", "InProgress", None),
        snapshot("demo-pipeline", "Succeeded", "Succeeded", "Succeeded"),
    ])
    probe = ScriptedProbe([
        ProbeResponse(status_code=502, body="Bad Gateway"),
        ProbeResponse(status_code=200, body=f"<h1>{EXPECTED_TEXT}</h1>"),
    ])

    orch = VerificationOrchestrator(source, probe, settings=settings)
    outcome = orch.verify(
        "demo-pipeline",
        "203.0.113.10",
        RetryPolicy(max_attempts=5, interval_seconds=0.2),
        RetryPolicy(max_attempts=5, interval_seconds=0.2),
        expect_response(200, EXPECTED_TEXT),
    )

    OutcomeRenderer().print_outcome(outcome)
    raise SystemExit(0 if outcome.verified else 1)


if __name__ == "__main__":
    main()
