"""Tests for configuration module."""

import json
import os

import pytest
from unittest.mock import patch

from pymup.domain.errors import InvalidSettings, MissingConfiguration
from pymup.infrastructure.config import (
    BuildConfig,
    PymupConfig,
    RunnerConfig,
    load_config,
    load_project,
    load_settings,
)


class TestToolConfig:
    def test_defaults(self):
        config = load_config(path="/nonexistent/pymup.json")
        assert config.log_level == "WARNING"
        assert config.runner.connect_timeout == 30
        assert config.runner.remote_tmp == "/tmp"
        assert config.build.meteor_binary == "meteor"
        assert isinstance(config.runner, RunnerConfig)
        assert isinstance(config.build, BuildConfig)

    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "pymup.json"
        config_file.write_text(json.dumps({
            "log_level": "DEBUG",
            "runner": {"connect_timeout": 5},
            "build": {"server_url": "https://app.example.com"},
        }))

        config = load_config(path=str(config_file))
        assert config.log_level == "DEBUG"
        assert config.runner.connect_timeout == 5
        assert config.build.server_url == "https://app.example.com"
        assert config.build.architecture == "os.linux.x86_64"

    def test_invalid_json_returns_defaults(self, tmp_path):
        config_file = tmp_path / "pymup.json"
        config_file.write_text("not valid json{{{")
        assert load_config(path=str(config_file)) == PymupConfig()

    def test_env_overrides(self):
        env = {
            "PYMUP_RUNNER_CONNECT_TIMEOUT": "60",
            "PYMUP_BUILD_METEOR_BINARY": "/opt/meteor",
            "PYMUP_LOG_LEVEL": "INFO",
        }
        with patch.dict(os.environ, env):
            config = load_config(path="/nonexistent/pymup.json")
        assert config.runner.connect_timeout == 60
        assert config.build.meteor_binary == "/opt/meteor"
        assert config.log_level == "INFO"


class TestProject:
    def test_load_project(self, tmp_path, raw_project):
        project_file = tmp_path / "mup.json"
        project_file.write_text(json.dumps(raw_project))

        project = load_project(str(project_file))

        assert project.raw == raw_project
        assert project.base_path == str(tmp_path.resolve())

    def test_missing_project_file(self, tmp_path):
        with pytest.raises(MissingConfiguration, match="not found"):
            load_project(str(tmp_path / "mup.json"))

    def test_invalid_project_file(self, tmp_path):
        project_file = tmp_path / "mup.json"
        project_file.write_text("[1, 2")
        with pytest.raises(MissingConfiguration, match="invalid"):
            load_project(str(project_file))

    def test_project_must_be_object(self, tmp_path):
        project_file = tmp_path / "mup.json"
        project_file.write_text("[]")
        with pytest.raises(MissingConfiguration):
            load_project(str(project_file))


class TestSettings:
    def test_missing_file_means_empty(self, tmp_path):
        assert load_settings(str(tmp_path / "settings.json")) == {}

    def test_load_settings(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        settings_file.write_text(json.dumps({"public": {"x": 1}}))
        assert load_settings(str(settings_file)) == {"public": {"x": 1}}

    def test_invalid_settings(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        settings_file.write_text("{oops")
        with pytest.raises(InvalidSettings):
            load_settings(str(settings_file))

    def test_settings_must_be_object(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        settings_file.write_text('"just a string"')
        with pytest.raises(InvalidSettings):
            load_settings(str(settings_file))
