"""Global test configuration.

Shared fixtures: a sample project config and an in-memory task runner that
records every dispatch instead of opening SSH connections.
"""

import pytest

from pymup.domain.ports.task_runner_port import TaskRunnerPort
from pymup.domain.value_objects.session import Session


class RecordingTaskRunner(TaskRunnerPort):
    """TaskRunnerPort fake. Fails task lists named in fail_lists, and any
    list dispatched to a session whose server is in fail_servers."""

    def __init__(self):
        self.calls = []
        self.fail_lists = set()
        self.fail_servers = set()

    async def run(self, task_list, sessions, series=False, verbose=False):
        self.calls.append((task_list, tuple(sessions), series))
        if task_list.name in self.fail_lists:
            return False
        return not any(s.server_name in self.fail_servers for s in sessions)

    @property
    def names(self):
        return [task_list.name for task_list, _, _ in self.calls]


@pytest.fixture
def runner():
    return RecordingTaskRunner()


@pytest.fixture
def raw_project():
    return {
        "servers": {
            "web1": {
                "host": "1.2.3.4",
                "username": "deploy",
                "pem": "~/.ssh/id_rsa",
                "env": {"SERVER_HOST": "1.2.3.4"},
            },
            "web2": {
                "host": "5.6.7.8",
                "username": "deploy",
                "env": {"SERVER_HOST": "5.6.7.8"},
            },
        },
        "meteor": {
            "name": "app",
            "path": "../app",
            "env": {"ROOT_URL": "https://example.com", "PORT": 3000},
        },
    }


@pytest.fixture
def sessions():
    return (
        Session(server_name="web1", host="1.2.3.4", user="deploy"),
        Session(server_name="web2", host="5.6.7.8", user="deploy"),
    )
