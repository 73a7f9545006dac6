"""Verification engine: pollers, state machine and orchestrator."""
