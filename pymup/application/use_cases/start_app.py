"""
Start App Use Case

Architectural Intent:
- Starts the container, then verifies the deployment answers on its port
- Series execution: one host is verified before the next is restarted
"""

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand


class StartApp(MeteorCommand):
    name = "start"

    async def execute(self, context: CommandContext) -> None:
        config = self._resolve(context)
        task_list = self._builder(context).start(config)
        await self._dispatch(
            task_list, self._sessions(context, config), context, series=True
        )
