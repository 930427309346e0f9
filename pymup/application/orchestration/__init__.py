"""
Application Orchestration Package

Architectural Intent:
- Contains workflow orchestration components
- Sequential, short-circuiting pipelines for multi-stage commands
"""

from pymup.application.orchestration.pipeline import (
    Pipeline,
    PipelineStage,
    PipelineResult,
    PipelineError,
)

__all__ = ["Pipeline", "PipelineStage", "PipelineResult", "PipelineError"]
