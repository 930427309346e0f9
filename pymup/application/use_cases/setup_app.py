"""
Setup App Use Case

Architectural Intent:
- Prepares every host: directories, docker, optional SSL material
- Hosts are independent, so they run concurrently
"""

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand


class SetupApp(MeteorCommand):
    name = "setup"

    async def execute(self, context: CommandContext) -> None:
        config = self._resolve(context)
        task_list = self._builder(context).setup(config)
        await self._dispatch(task_list, self._sessions(context, config), context)
