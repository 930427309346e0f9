"""
Task List Builder

Architectural Intent:
- Maps a command name and a resolved DeploymentConfig to the ordered
  list of remote actions that command requires
- Pure: builds descriptors only, never touches the network or disk
- Command-specific inputs (bundle path, settings) are passed explicitly

Ordering Constraints:
- setup: environment script first; SSL cleanup/copy precede verification
- envconfig: startup script before environment file
- start: start script before deploy verification
"""

from __future__ import annotations
import json
import logging
import os
import shlex
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from pymup.domain.entities.deployment_config import DeploymentConfig, ServerConfig
from pymup.domain.errors import MissingConfiguration
from pymup.domain.value_objects.task import (
    CommandTask,
    CopyTask,
    ScriptTask,
    Task,
    TaskList,
)

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parents[2] / "assets"

COMMANDS = ("setup", "push", "envconfig", "start", "stop", "logs")


def env_value(value: Any) -> str:
    """Text written for a config value: strings as-is, anything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_environment(
    config: DeploymentConfig, settings: Mapping[str, Any]
) -> dict[str, str]:
    """Environment map delivered to the container.

    PORT is dropped: the container always listens on its image port and the
    published port is wired by start.sh.
    """
    env = {key: env_value(value) for key, value in config.env.items()}
    env["METEOR_SETTINGS"] = json.dumps(settings)
    env.pop("PORT", None)
    return env


class TaskListBuilder:
    def __init__(self, base_path: str = ".", assets_dir: Optional[Path] = None):
        self.base_path = base_path
        self.assets_dir = Path(assets_dir) if assets_dir else ASSETS_DIR

    def _asset(self, *parts: str) -> str:
        return str(self.assets_dir.joinpath(*parts))

    def _local(self, path: str) -> str:
        return os.path.normpath(
            os.path.join(self.base_path, os.path.expanduser(path))
        )

    def build(
        self,
        command: str,
        config: DeploymentConfig,
        *,
        bundle_path: Optional[str] = None,
        settings: Optional[Mapping[str, Any]] = None,
        log_args: Sequence[str] = (),
        on_output: Optional[Callable[[str, str], None]] = None,
    ) -> TaskList:
        if command == "setup":
            return self.setup(config)
        if command == "push":
            if bundle_path is None:
                raise ValueError("push requires a bundle path")
            return self.push(config, bundle_path)
        if command == "envconfig":
            return self.envconfig(config, settings or {})
        if command == "start":
            return self.start(config)
        if command == "stop":
            return self.stop(config)
        if command == "logs":
            return self.logs(config, log_args, on_output)
        raise ValueError(f"Unknown command: {command}")

    def setup(self, config: DeploymentConfig) -> TaskList:
        tasks: list[Task] = [
            ScriptTask(
                "Setup Environment",
                self._asset("meteor-setup.sh"),
                {"name": config.name},
            )
        ]

        ssl = config.ssl
        if ssl and not ssl.fully_automatic:
            if ssl.uploads_certificates:
                if not ssl.crt or not ssl.key:
                    raise MissingConfiguration(
                        "ssl.crt and ssl.key are required unless ssl.upload is false"
                    )
                tasks.append(
                    ScriptTask(
                        "Cleaning up SSL Certificates",
                        self._asset("ssl-cleanup.sh"),
                        {"name": config.name},
                    )
                )
                tasks.append(
                    CopyTask(
                        "Copying SSL Certificate Bundle",
                        src=self._local(ssl.crt),
                        dest=f"{config.app_dir}/config/bundle.crt",
                    )
                )
                tasks.append(
                    CopyTask(
                        "Copying SSL Private Key",
                        src=self._local(ssl.key),
                        dest=f"{config.app_dir}/config/private.key",
                    )
                )
            tasks.append(
                ScriptTask(
                    "Verifying SSL Configurations",
                    self._asset("verify-ssl-config.sh"),
                    {"name": config.name},
                )
            )

        return TaskList("Setup Meteor", tuple(tasks))

    def push(self, config: DeploymentConfig, bundle_path: str) -> TaskList:
        return TaskList(
            "Pushing Meteor App",
            (
                CopyTask(
                    "Pushing Meteor App Bundle to The Server",
                    src=bundle_path,
                    dest=f"{config.app_dir}/tmp/bundle.tar.gz",
                    progress_bar=config.enable_upload_progress_bar,
                ),
            ),
        )

    def envconfig(
        self, config: DeploymentConfig, settings: Mapping[str, Any]
    ) -> TaskList:
        start_vars = {
            "appName": config.name,
            "useLocalMongo": 1 if config.use_local_mongo else 0,
            "port": config.app_port,
            "bind": config.bind_address,
            "sslConfig": config.ssl.to_dict() if config.ssl else None,
            "logConfig": {
                "opts": {k: env_value(v) for k, v in config.log.opts.items()}
            },
            "volumes": dict(config.volumes),
            "docker": config.docker.to_dict(),
            "nginxClientUploadLimit": config.nginx.client_upload_limit,
        }
        return TaskList(
            "Configuring App",
            (
                CopyTask(
                    "Pushing the Startup Script",
                    src=self._asset("templates", "start.sh"),
                    dest=f"{config.app_dir}/config/start.sh",
                    vars=start_vars,
                ),
                CopyTask(
                    "Sending Environment Variables",
                    src=self._asset("templates", "env.list"),
                    dest=f"{config.app_dir}/config/env.list",
                    vars={
                        "env": build_environment(config, settings),
                        "appName": config.name,
                    },
                ),
            ),
        )

    def register_server(
        self, config: DeploymentConfig, server_name: str, server: ServerConfig
    ) -> TaskList:
        """Single-task list appending one server's SERVER_HOST to env.list."""
        server_host = server.server_host
        if server_host is None:
            logger.debug("%s has no SERVER_HOST, using %s", server_name, server.host)
            server_host = server.host
        env_file = f"{config.app_dir}/config/env.list"
        line = shlex.quote(f"SERVER_HOST={server_host}")
        path = shlex.quote(env_file)
        return TaskList(
            "Sending Server Host",
            (
                CommandTask(
                    "echo to file",
                    f"echo {line} >> {path}; cat {path}",
                ),
            ),
        )

    def start(self, config: DeploymentConfig) -> TaskList:
        return TaskList(
            "Start Meteor",
            (
                ScriptTask(
                    "Start Meteor",
                    self._asset("meteor-start.sh"),
                    {"appName": config.name},
                ),
                ScriptTask(
                    "Verifying Deployment",
                    self._asset("meteor-deploy-check.sh"),
                    {
                        "deployCheckWaitTime": config.deploy_check_wait_time,
                        "appName": config.name,
                        "deployCheckPort": config.verification_port,
                    },
                ),
            ),
        )

    def stop(self, config: DeploymentConfig) -> TaskList:
        return TaskList(
            "Stop Meteor",
            (
                ScriptTask(
                    "Stop Meteor",
                    self._asset("meteor-stop.sh"),
                    {"appName": config.name},
                ),
            ),
        )

    def logs(
        self,
        config: DeploymentConfig,
        args: Sequence[str] = (),
        on_output: Optional[Callable[[str, str], None]] = None,
    ) -> TaskList:
        parts = ["sudo", "docker", "logs", *args, config.name]
        command = " ".join(shlex.quote(p) for p in parts) + " 2>&1"
        return TaskList(
            "Meteor Logs",
            (CommandTask("Fetching Logs", command, on_output=on_output),),
        )
