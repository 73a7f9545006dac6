"""Deploycheck: two-phase deployment verification.

Polls a multi-stage release pipeline until every stage succeeded, then
polls the deployed endpoint until a caller-supplied predicate accepts a
response, and reports one verdict with diagnostic detail.
"""

__version__ = "0.1.0"

from deploycheck.core.orchestrator import VerificationOrchestrator
from deploycheck.core.predicates import expect_response
from deploycheck.models.policy import RetryPolicy
from deploycheck.models.verification import VerificationOutcome, VerificationState

__all__ = [
    "VerificationOrchestrator",
    "VerificationOutcome",
    "VerificationState",
    "RetryPolicy",
    "expect_response",
    "__version__",
]
