"""
Meteor Command Base

Architectural Intent:
- Shared plumbing for every command use case
- Resolves the config before any task list is built
- Turns a runner's False into a typed ExecutionFailure
"""

import logging
from typing import Sequence

from pymup.application.dtos.command_dtos import CommandContext
from pymup.domain.entities.deployment_config import DeploymentConfig
from pymup.domain.errors import ExecutionFailure
from pymup.domain.ports.task_runner_port import TaskRunnerPort
from pymup.domain.services.config_resolver import resolve_config
from pymup.domain.services.session_fanout import sessions_for
from pymup.domain.services.task_list_builder import TaskListBuilder
from pymup.domain.value_objects.session import Session
from pymup.domain.value_objects.task import TaskList

logger = logging.getLogger(__name__)


class MeteorCommand:
    name = ""

    def __init__(self, task_runner: TaskRunnerPort):
        self.task_runner = task_runner

    def _resolve(self, context: CommandContext) -> DeploymentConfig:
        logger.debug("exec => mup meteor %s", self.name)
        return resolve_config(context.raw_config)

    def _sessions(
        self, context: CommandContext, config: DeploymentConfig
    ) -> list[Session]:
        if context.sessions is not None:
            return list(context.sessions)
        return sessions_for(config.servers)

    def _builder(self, context: CommandContext) -> TaskListBuilder:
        return TaskListBuilder(context.base_path)

    async def _dispatch(
        self,
        task_list: TaskList,
        sessions: Sequence[Session],
        context: CommandContext,
        series: bool = False,
    ) -> None:
        logger.info(
            "Dispatching %s (%d tasks) to %d hosts",
            task_list.name,
            len(task_list),
            len(sessions),
        )
        ok = await self.task_runner.run(
            task_list, sessions, series=series, verbose=context.verbose
        )
        if not ok:
            raise ExecutionFailure(task_list.name)
