"""Tests for the envconfig use case and its host-registration fan-out."""

import json

import pytest

from pymup.application.dtos.command_dtos import CommandContext
from pymup.application.use_cases.configure_app import ConfigureApp
from pymup.domain.errors import ExecutionFailure, InvalidSettings, SessionMismatch


def _context(raw_project, sessions=None, settings=None):
    return CommandContext(
        raw_config=raw_project,
        settings_loader=lambda: settings or {"a": 1},
        sessions=sessions,
    )


class TestConfigureApp:
    @pytest.mark.asyncio
    async def test_config_then_registration(self, runner, raw_project, sessions):
        await ConfigureApp(runner).execute(_context(raw_project, sessions))

        assert runner.names == [
            "Configuring App",
            "Sending Server Host",
            "Sending Server Host",
        ]
        config_list, config_sessions, series = runner.calls[0]
        assert series is True
        assert config_sessions == sessions
        env = config_list.tasks[1].vars["env"]
        assert env["METEOR_SETTINGS"] == json.dumps({"a": 1})
        assert "PORT" not in env

    @pytest.mark.asyncio
    async def test_each_server_gets_only_its_host(self, runner, raw_project, sessions):
        s1, s2 = sessions
        await ConfigureApp(runner).execute(_context(raw_project, sessions))

        dispatches = runner.calls[1:]
        assert len(dispatches) == 2
        by_session = {d[1]: d[0] for d in dispatches}
        assert set(by_session) == {(s1,), (s2,)}
        s1_command = by_session[(s1,)].tasks[0].command
        s2_command = by_session[(s2,)].tasks[0].command
        assert "1.2.3.4" in s1_command and "5.6.7.8" not in s1_command
        assert "5.6.7.8" in s2_command and "1.2.3.4" not in s2_command
        assert all(len(d[0]) == 1 for d in dispatches)

    @pytest.mark.asyncio
    async def test_config_failure_skips_registration(
        self, runner, raw_project, sessions
    ):
        runner.fail_lists.add("Configuring App")

        with pytest.raises(ExecutionFailure) as exc_info:
            await ConfigureApp(runner).execute(_context(raw_project, sessions))

        assert exc_info.value.task_list_name == "Configuring App"
        assert runner.names == ["Configuring App"]

    @pytest.mark.asyncio
    async def test_registration_failures_collected(self, runner, raw_project, sessions):
        class FailRegistrationOnWeb1(type(runner)):
            async def run(self, task_list, sessions, series=False, verbose=False):
                self.calls.append((task_list, tuple(sessions), series))
                if task_list.name == "Sending Server Host":
                    return sessions[0].server_name != "web1"
                return True

        fan_runner = FailRegistrationOnWeb1()
        with pytest.raises(ExecutionFailure) as exc_info:
            await ConfigureApp(fan_runner).execute(_context(raw_project, sessions))

        assert exc_info.value.servers == ("web1",)
        registered = [c[1][0].server_name for c in fan_runner.calls[1:]]
        assert sorted(registered) == ["web1", "web2"]

    @pytest.mark.asyncio
    async def test_missing_session_fails_before_dispatch(
        self, runner, raw_project, sessions
    ):
        with pytest.raises(SessionMismatch):
            await ConfigureApp(runner).execute(_context(raw_project, sessions[:1]))
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_invalid_settings_fail_before_dispatch(self, runner, raw_project):
        def broken():
            raise InvalidSettings("bad settings")

        context = CommandContext(raw_config=raw_project, settings_loader=broken)
        with pytest.raises(InvalidSettings):
            await ConfigureApp(runner).execute(context)
        assert runner.calls == []
