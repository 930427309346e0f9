"""Tests for CLI module."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from pymup.application.orchestration.pipeline import PipelineResult
from pymup.domain.errors import BuildCacheMiss, MissingConfiguration
from pymup.presentation.cli.cli import async_main


def _make_container(**overrides):
    """Create a mock container with sensible defaults."""
    container = MagicMock()
    for name in ("setup", "push", "envconfig", "start", "stop", "logs"):
        getattr(container, name).execute = AsyncMock(return_value=None)
    container.deploy.execute = AsyncMock(
        return_value=PipelineResult(success=True, completed_stages=("push",))
    )
    for key, value in overrides.items():
        setattr(container, key, value)
    return container


@pytest.fixture
def project_file(tmp_path, raw_project):
    path = tmp_path / "mup.json"
    path.write_text(json.dumps(raw_project))
    (tmp_path / "settings.json").write_text(json.dumps({"a": 1}))
    return path


async def _run(argv, container):
    with patch("sys.argv", ["pymup", *argv]), patch(
        "pymup.composition_root.create_container", return_value=container
    ):
        await async_main()


class TestCLIHelp:
    @pytest.mark.asyncio
    async def test_no_command_prints_help(self, capsys):
        with patch("sys.argv", ["pymup"]):
            await async_main()
        assert "deploy Meteor apps" in capsys.readouterr().out

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", ["setup", "push", "deploy", "logs"])
    async def test_command_help(self, command):
        with patch("sys.argv", ["pymup", command, "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()


class TestCLICommands:
    @pytest.mark.asyncio
    async def test_setup_success(self, capsys, project_file):
        container = _make_container()
        await _run(["-c", str(project_file), "setup"], container)

        context = container.setup.execute.await_args.args[0]
        assert context.base_path == str(project_file.parent.resolve())
        assert context.load_settings() == {"a": 1}
        assert "setup Successful" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_push_cached_build_flag(self, project_file):
        container = _make_container()
        await _run(["-c", str(project_file), "push", "--cached-build"], container)
        context = container.push.execute.await_args.args[0]
        assert context.cached_build is True

    @pytest.mark.asyncio
    async def test_deploy_success(self, capsys, project_file):
        container = _make_container()
        await _run(["-c", str(project_file), "deploy"], container)
        assert "Deployment Successful" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_deploy_failure_exits_nonzero(self, capsys, project_file):
        error = BuildCacheMiss("/tmp/mup-meteor-x")
        container = _make_container()
        container.deploy.execute = AsyncMock(return_value=PipelineResult(
            success=False, failed_stage="push", error=error
        ))

        with pytest.raises(SystemExit) as exc_info:
            await _run(["-c", str(project_file), "deploy", "--cached-build"], container)

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "failed at stage 'push'" in out
        assert "--cached-build" in out

    @pytest.mark.asyncio
    async def test_missing_section_exits_nonzero(self, capsys, project_file):
        container = _make_container()
        container.stop.execute = AsyncMock(side_effect=MissingConfiguration())

        with pytest.raises(SystemExit) as exc_info:
            await _run(["-c", str(project_file), "stop"], container)

        assert exc_info.value.code == 1
        assert "error: no configs found for meteor" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_project_file(self, capsys, tmp_path):
        with pytest.raises(SystemExit):
            await _run(["-c", str(tmp_path / "nope.json"), "start"], _make_container())
        assert "config file not found" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_logs_args_forwarded(self, capsys, project_file):
        container = _make_container()
        await _run(["-c", str(project_file), "logs", "--tail=50"], container)

        _, docker_args, on_output = container.logs.execute.await_args.args
        assert docker_args == ["--tail=50"]
        on_output("1.2.3.4", "hello\nworld")
        out = capsys.readouterr().out
        assert "[1.2.3.4] hello" in out
        assert "[1.2.3.4] world" in out
