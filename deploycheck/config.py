"""Runtime configuration — env-driven defaults for verification runs.

Centralized config using pydantic-settings. Reads from a .env file and
DEPLOYCHECK_* environment variables. These values only supply defaults;
the orchestrator itself always receives explicit policies.
"""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from deploycheck.models.policy import RetryPolicy


class VerifySettings(BaseSettings):
    """Verification defaults with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DEPLOYCHECK_AWS_REGION=eu-west-1
        export DEPLOYCHECK_ENDPOINT_MAX_ATTEMPTS=60
        export DEPLOYCHECK_OVERALL_TIMEOUT_SECONDS=900
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DEPLOYCHECK_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    aws_region: str | None = None

    # Stage-aggregation poller
    pipeline_max_attempts: int = 30
    pipeline_interval_seconds: float = 10.0
    fail_fast_on_stage_failure: bool = False

    # Endpoint poller
    endpoint_max_attempts: int = 30
    endpoint_interval_seconds: float = 10.0
    probe_timeout_seconds: float = 10.0

    # Whole-run wall-clock bound; None means the retry budgets are the only bound
    overall_timeout_seconds: float | None = None

    def pipeline_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.pipeline_max_attempts,
            interval_seconds=self.pipeline_interval_seconds,
        )

    def endpoint_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.endpoint_max_attempts,
            interval_seconds=self.endpoint_interval_seconds,
        )


def configure_logging(settings: VerifySettings | None = None) -> None:
    """Apply the configured log level to the ``deploycheck`` logger tree."""
    settings = settings or VerifySettings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("deploycheck").setLevel(level)
