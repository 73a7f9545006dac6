"""Collaborator protocols and their concrete adapters."""

from deploycheck.sources.base import HttpProbe, PipelineStatusSource
from deploycheck.sources.codepipeline import CodePipelineStatusSource, parse_pipeline_state
from deploycheck.sources.http import HttpxProbe, normalize_address
from deploycheck.sources.scripted import ScriptedProbe, StaticStatusSource, snapshot

__all__ = [
    "PipelineStatusSource",
    "HttpProbe",
    "CodePipelineStatusSource",
    "parse_pipeline_state",
    "HttpxProbe",
    "normalize_address",
    "StaticStatusSource",
    "ScriptedProbe",
    "snapshot",
]
