from typing import Callable, Optional, Sequence

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand


class ViewLogs(MeteorCommand):
    """Fetches `docker logs` output for the app container from every host."""

    name = "logs"

    async def execute(
        self,
        context: CommandContext,
        args: Sequence[str] = (),
        on_output: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        config = self._resolve(context)
        task_list = self._builder(context).logs(config, args, on_output)
        await self._dispatch(task_list, self._sessions(context, config), context)
