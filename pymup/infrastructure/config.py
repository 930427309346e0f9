"""
Configuration Module

Architectural Intent:
- Loads the project file (mup.json) and application settings (settings.json)
- Provides typed access to the tool's own behaviour settings
- Environment variables override file-based tool config

Design Decisions:
- Project config stays a plain mapping; the domain resolver owns its defaults
- Tool config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import dataclasses
import json
import logging
import os

from pymup.domain.errors import InvalidSettings, MissingConfiguration

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_FILE = "mup.json"
DEFAULT_SETTINGS_FILE = "settings.json"


@dataclass(frozen=True)
class RunnerConfig:
    """Remote execution configuration."""
    connect_timeout: int = 30
    remote_tmp: str = "/tmp"


@dataclass(frozen=True)
class BuildConfig:
    """Local bundle build configuration."""
    meteor_binary: str = "meteor"
    server_url: str = "http://localhost:3000"
    architecture: str = "os.linux.x86_64"


@dataclass(frozen=True)
class PymupConfig:
    """Root configuration for the pymup tool itself."""
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    log_level: str = "WARNING"


@dataclass(frozen=True)
class Project:
    """A loaded project file and the directory its relative paths resolve from."""
    raw: dict[str, Any]
    base_path: str


def _env_override(data: dict, prefix: str = "PYMUP") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern PYMUP_SECTION_KEY.
    For example: PYMUP_RUNNER_CONNECT_TIMEOUT=60, PYMUP_BUILD_METEOR_BINARY=mtr
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        parts = key[len(prefix) + 1:].lower().split("_", 1)
        if len(parts) == 2 and parts[0] in ("runner", "build"):
            section, field_name = parts
            data.setdefault(section, {})
            data[section][field_name] = value
        else:
            data[key[len(prefix) + 1:].lower()] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    # Convert string numbers to int/bool
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str):
            if f.type == "int":
                filtered[f.name] = int(filtered[f.name])
            elif f.type == "bool":
                filtered[f.name] = filtered[f.name].lower() in ("true", "1", "yes")

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "PYMUP",
) -> PymupConfig:
    """Load tool configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (PYMUP_SECTION_KEY)
    2. Config file values
    3. Defaults
    """
    config_path = Path(path) if path else Path("pymup.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return PymupConfig(
        runner=_build_sub_config(RunnerConfig, data.get("runner", {})),
        build=_build_sub_config(BuildConfig, data.get("build", {})),
        log_level=data.get("log_level", "WARNING"),
    )


def load_project(path: Optional[str] = None) -> Project:
    """Load the project file (mup.json).

    Unlike the tool config, a missing or broken project file is fatal.
    """
    project_path = Path(path or DEFAULT_PROJECT_FILE).expanduser().resolve()
    try:
        with open(project_path) as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise MissingConfiguration(f"config file not found: {project_path}")
    except json.JSONDecodeError as e:
        raise MissingConfiguration(f"invalid config file {project_path}: {e}")
    if not isinstance(raw, dict):
        raise MissingConfiguration(f"config file {project_path} must hold an object")
    return Project(raw=raw, base_path=str(project_path.parent))


def load_settings(path: str) -> dict[str, Any]:
    """Load application settings. A missing file means no settings."""
    try:
        with open(path) as f:
            settings = json.load(f)
    except FileNotFoundError:
        logger.debug("Settings file not found: %s", path)
        return {}
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidSettings(f"unable to load settings from {path}: {e}")
    if not isinstance(settings, dict):
        raise InvalidSettings(f"settings in {path} must be a JSON object")
    return settings
