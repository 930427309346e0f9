"""
Deploy App Use Case

Architectural Intent:
- push -> envconfig -> start, strictly in sequence
- Settings and config are validated before anything is built or sent
- A failing stage stops the pipeline; earlier remote effects remain
"""

import logging

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.orchestration.pipeline import (
    Pipeline,
    PipelineResult,
    PipelineStage,
)
from pymup.application.use_cases.configure_app import ConfigureApp
from pymup.application.use_cases.push_app import PushApp
from pymup.application.use_cases.start_app import StartApp
from pymup.domain.services.config_resolver import resolve_config

logger = logging.getLogger(__name__)


class DeployApp:
    def __init__(self, push: PushApp, configure: ConfigureApp, start: StartApp):
        self.push = push
        self.configure = configure
        self.start = start

    async def execute(self, context: CommandContext) -> PipelineResult:
        async def validate_step() -> None:
            context.load_settings()
            resolve_config(context.raw_config)

        async def push_step() -> None:
            await self.push.execute(context)

        async def envconfig_step() -> None:
            await self.configure.execute(context)

        async def start_step() -> None:
            await self.start.execute(context)

        pipeline = Pipeline([
            PipelineStage("validate", validate_step),
            PipelineStage("push", push_step),
            PipelineStage("envconfig", envconfig_step),
            PipelineStage("start", start_step),
        ])

        result = await pipeline.run()
        if result.success:
            logger.info("Deployment successful.")
        else:
            logger.error("Deployment stopped at %s: %s", result.failed_stage, result.error)
        return result
