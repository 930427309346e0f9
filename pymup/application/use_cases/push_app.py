"""
Push App Use Case

Architectural Intent:
- Builds the bundle locally (or reuses the cached one) and uploads it
- Build cache misses fail before anything is dispatched
- Series execution: hosts receive the bundle one after another
"""

import os

from pymup.application.build_cache import BuildCache
from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand
from pymup.domain.ports.task_runner_port import TaskRunnerPort
from pymup.domain.value_objects.artifact import BuildArtifact


class PushApp(MeteorCommand):
    name = "push"

    def __init__(self, task_runner: TaskRunnerPort, build_cache: BuildCache):
        super().__init__(task_runner)
        self.build_cache = build_cache

    async def execute(self, context: CommandContext) -> BuildArtifact:
        config = self._resolve(context)
        app_path = os.path.normpath(
            os.path.join(context.base_path, os.path.expanduser(config.path))
        )

        artifact = await self.build_cache.prepare(
            app_path,
            config.build_options,
            use_cached=context.cached_build,
            verbose=context.verbose,
        )

        task_list = self._builder(context).push(config, artifact.bundle_path)
        await self._dispatch(
            task_list, self._sessions(context, config), context, series=True
        )
        return artifact
