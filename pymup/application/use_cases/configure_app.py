"""
Configure App Use Case (envconfig)

Architectural Intent:
- Pushes start.sh and env.list to every host in series
- Then fans out one SERVER_HOST registration per configured server,
  each on that server's own session
- Registrations are independent: all of them run, and failures are
  reported together afterwards
"""

import asyncio
import logging

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.meteor_command import MeteorCommand
from pymup.domain.errors import ExecutionFailure
from pymup.domain.services.session_fanout import ServerSession, pair_sessions

logger = logging.getLogger(__name__)


class ConfigureApp(MeteorCommand):
    name = "envconfig"

    async def execute(self, context: CommandContext) -> None:
        config = self._resolve(context)
        settings = context.load_settings()
        sessions = self._sessions(context, config)
        pairs = pair_sessions(config.servers, sessions)

        builder = self._builder(context)
        await self._dispatch(
            builder.envconfig(config, settings), sessions, context, series=True
        )

        async def register(pair: ServerSession) -> bool:
            task_list = builder.register_server(config, pair.server_name, pair.server)
            return await self.task_runner.run(
                task_list, [pair.session], verbose=context.verbose
            )

        results = await asyncio.gather(
            *(register(p) for p in pairs), return_exceptions=True
        )

        failed = []
        for pair, result in zip(pairs, results):
            if isinstance(result, Exception):
                logger.error(
                    "Server host registration crashed on %s: %s",
                    pair.server_name,
                    result,
                )
                failed.append(pair.server_name)
            elif not result:
                failed.append(pair.server_name)
        if failed:
            raise ExecutionFailure("Sending Server Host", failed)
