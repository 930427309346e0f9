"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the pymup application
- Single place where all adapters and use cases are wired together
- No adapter instantiation should occur outside this module

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Factory function creates and wires all dependencies from tool config
"""

from dataclasses import dataclass
from typing import Optional

from pymup.application.build_cache import BuildCache
from pymup.application.use_cases.configure_app import ConfigureApp
from pymup.application.use_cases.deploy_app import DeployApp
from pymup.application.use_cases.push_app import PushApp
from pymup.application.use_cases.setup_app import SetupApp
from pymup.application.use_cases.start_app import StartApp
from pymup.application.use_cases.stop_app import StopApp
from pymup.application.use_cases.view_logs import ViewLogs
from pymup.infrastructure.adapters.fabric_task_runner import FabricTaskRunner
from pymup.infrastructure.adapters.meteor_builder import MeteorBundleBuilder
from pymup.infrastructure.config import PymupConfig


@dataclass
class PymupContainer:
    """DI container holding all wired dependencies."""

    task_runner: FabricTaskRunner
    builder: MeteorBundleBuilder
    build_cache: BuildCache
    setup: SetupApp
    push: PushApp
    envconfig: ConfigureApp
    start: StartApp
    stop: StopApp
    logs: ViewLogs
    deploy: DeployApp


def create_container(config: Optional[PymupConfig] = None) -> PymupContainer:
    """Create and wire all dependencies."""
    config = config or PymupConfig()
    task_runner = FabricTaskRunner(
        connect_timeout=config.runner.connect_timeout,
        remote_tmp=config.runner.remote_tmp,
    )
    builder = MeteorBundleBuilder(
        server_url=config.build.server_url,
        architecture=config.build.architecture,
        executable=config.build.meteor_binary,
    )
    build_cache = BuildCache(builder)

    push = PushApp(task_runner, build_cache)
    envconfig = ConfigureApp(task_runner)
    start = StartApp(task_runner)

    return PymupContainer(
        task_runner=task_runner,
        builder=builder,
        build_cache=build_cache,
        setup=SetupApp(task_runner),
        push=push,
        envconfig=envconfig,
        start=start,
        stop=StopApp(task_runner),
        logs=ViewLogs(task_runner),
        deploy=DeployApp(push, envconfig, start),
    )
