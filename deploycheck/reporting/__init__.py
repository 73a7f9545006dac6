"""Terminal reporting of verification outcomes."""

from deploycheck.reporting.renderer import OutcomeRenderer

__all__ = ["OutcomeRenderer"]
