"""
Fabric Task Runner

Architectural Intent:
- Infrastructure adapter implementing TaskRunnerPort via Fabric/SSH
- Script and template vars are rendered locally with Jinja2
- Series mode walks hosts one by one; otherwise hosts run on executor
  threads concurrently

Security:
- SSH connections use connect_timeout, allow_agent, look_for_keys
- Remote paths and command arguments quoted via shlex.quote()
"""

import asyncio
import io
import logging
import os
import shlex
import uuid
from typing import Any, Callable, Mapping, Optional, Sequence

from fabric import Connection
from jinja2 import Environment, FileSystemLoader

from pymup.domain.ports.task_runner_port import TaskRunnerPort
from pymup.domain.value_objects.session import Session
from pymup.domain.value_objects.task import (
    CommandTask,
    CopyTask,
    ScriptTask,
    Task,
    TaskList,
)

logger = logging.getLogger(__name__)


class FabricTaskRunner(TaskRunnerPort):
    """Adapter implementing TaskRunnerPort via Fabric/SSH."""

    def __init__(self, connect_timeout: int = 30, remote_tmp: str = "/tmp"):
        self.connect_timeout = connect_timeout
        self.remote_tmp = remote_tmp

    def _get_connection(self, session: Session) -> Connection:
        connect_kwargs: dict[str, Any] = {
            "allow_agent": True,
            "look_for_keys": True,
        }
        if session.pem:
            connect_kwargs["key_filename"] = os.path.expanduser(session.pem)
        if session.password:
            connect_kwargs["password"] = session.password
        return Connection(
            host=session.host,
            user=session.user,
            port=session.port,
            connect_timeout=self.connect_timeout,
            connect_kwargs=connect_kwargs,
        )

    def render(self, path: str, variables: Optional[Mapping[str, Any]]) -> str:
        env = Environment(
            loader=FileSystemLoader(os.path.dirname(os.path.abspath(path))),
            keep_trailing_newline=True,
        )
        template = env.get_template(os.path.basename(path))
        return template.render(**(variables or {}))

    def _progress(self, session: Session, title: str) -> Callable[[int, int], None]:
        last = {"step": -1}

        def report(sent: int, total: int) -> None:
            if not total:
                return
            step = sent * 10 // total
            if step != last["step"]:
                last["step"] = step
                logger.info(
                    "%s %d%%", title, step * 10, extra={"host": session.host}
                )

        return report

    def _run_script(self, conn: Connection, task: ScriptTask, verbose: bool) -> bool:
        content = self.render(task.script, task.vars)
        remote = f"{self.remote_tmp}/pymup-{uuid.uuid4().hex}.sh"
        conn.put(io.StringIO(content), remote)
        quoted = shlex.quote(remote)
        result = conn.run(
            f"bash {quoted}; status=$?; rm -f {quoted}; exit $status",
            hide=not verbose,
            warn=True,
        )
        if result.failed:
            logger.error(
                "%s failed: %s", task.title, result.stderr, extra={"host": conn.host}
            )
        return result.ok

    def _run_copy(self, conn: Connection, session: Session, task: CopyTask) -> bool:
        if task.vars is not None:
            conn.put(io.StringIO(self.render(task.src, task.vars)), task.dest)
        elif task.progress_bar:
            conn.sftp().put(
                task.src, task.dest, callback=self._progress(session, task.title)
            )
        else:
            conn.put(task.src, task.dest)
        return True

    def _run_command(self, conn: Connection, task: CommandTask, verbose: bool) -> bool:
        result = conn.run(task.command, hide=not verbose, warn=True)
        if task.on_output is not None:
            task.on_output(conn.host, result.stdout)
        if result.failed:
            logger.error(
                "%s failed: %s", task.title, result.stderr, extra={"host": conn.host}
            )
        return result.ok

    def _run_task(
        self, conn: Connection, session: Session, task: Task, verbose: bool
    ) -> bool:
        if isinstance(task, ScriptTask):
            return self._run_script(conn, task, verbose)
        if isinstance(task, CopyTask):
            return self._run_copy(conn, session, task)
        if isinstance(task, CommandTask):
            return self._run_command(conn, task, verbose)
        raise TypeError(f"Unsupported task: {task!r}")

    def run_on_session(
        self, task_list: TaskList, session: Session, verbose: bool = False
    ) -> bool:
        """Run the whole list on one host, stopping at its first failed task."""
        conn = self._get_connection(session)
        try:
            for task in task_list:
                logger.info("%s", task.title, extra={"host": session.host})
                if not self._run_task(conn, session, task, verbose):
                    return False
            return True
        except Exception as e:
            logger.error(
                "%s failed on %s: %s", task_list.name, session.server_name, e,
                extra={"host": session.host},
            )
            return False
        finally:
            conn.close()

    async def run(
        self,
        task_list: TaskList,
        sessions: Sequence[Session],
        series: bool = False,
        verbose: bool = False,
    ) -> bool:
        if not sessions:
            return True

        loop = asyncio.get_event_loop()
        if series:
            for session in sessions:
                ok = await loop.run_in_executor(
                    None, self.run_on_session, task_list, session, verbose
                )
                if not ok:
                    return False
            return True

        results = await asyncio.gather(
            *(
                loop.run_in_executor(
                    None, self.run_on_session, task_list, session, verbose
                )
                for session in sessions
            )
        )
        return all(results)
