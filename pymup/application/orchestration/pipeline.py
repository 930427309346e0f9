"""
Pipeline Orchestration Module

Architectural Intent:
- Sequential stage execution for multi-stage commands (deploy)
- Each stage must fully succeed before the next is dispatched
- A failing stage short-circuits the rest; nothing is compensated

Result:
- PipelineResult names the completed stages and, on failure, the stage
  that failed together with its typed error
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from pymup.domain.errors import DeployError

logger = logging.getLogger(__name__)


@dataclass
class PipelineStage:
    name: str
    execute: Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class PipelineResult:
    success: bool
    completed_stages: tuple[str, ...] = ()
    failed_stage: Optional[str] = None
    error: Optional[DeployError] = None

    def raise_for_failure(self) -> None:
        if self.error is not None:
            raise self.error


class PipelineError(Exception):
    pass


@dataclass
class Pipeline:
    stages: list[PipelineStage] = field(default_factory=list)

    def __post_init__(self) -> None:
        names = [s.name for s in self.stages]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise PipelineError(f"Duplicate stage names: {sorted(duplicates)}")

    async def run(self) -> PipelineResult:
        completed: list[str] = []
        for stage in self.stages:
            logger.info("Running stage %s", stage.name)
            try:
                await stage.execute()
            except DeployError as e:
                logger.error("Stage %s failed: %s", stage.name, e)
                return PipelineResult(
                    success=False,
                    completed_stages=tuple(completed),
                    failed_stage=stage.name,
                    error=e,
                )
            completed.append(stage.name)
        return PipelineResult(success=True, completed_stages=tuple(completed))
