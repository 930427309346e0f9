from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand


class StopApp(MeteorCommand):
    """Stops the app container on every host, concurrently."""

    name = "stop"

    async def execute(self, context: CommandContext) -> None:
        config = self._resolve(context)
        task_list = self._builder(context).stop(config)
        await self._dispatch(task_list, self._sessions(context, config), context)
