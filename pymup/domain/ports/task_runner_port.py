"""
Task Runner Port

Architectural Intent:
- Port interface for the remote task-execution engine
- Opens connections, runs scripts, copies files on each session's host
- Implemented by adapters (Fabric, in-memory fakes for tests)
"""

from abc import ABC, abstractmethod
from typing import Sequence
from pymup.domain.value_objects.session import Session
from pymup.domain.value_objects.task import TaskList


class TaskRunnerPort(ABC):
    """
    Port interface for executing task lists on remote hosts.
    """

    @abstractmethod
    async def run(
        self,
        task_list: TaskList,
        sessions: Sequence[Session],
        series: bool = False,
        verbose: bool = False,
    ) -> bool:
        """
        Runs every task of the list on every session.
        With series=True one host finishes its whole list before the next
        host starts; otherwise hosts may run concurrently.
        Returns True only if all tasks succeeded on all hosts.
        """
        pass
