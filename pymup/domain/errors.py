"""
Deployment Errors

Architectural Intent:
- Typed failures raised by domain services and use cases
- Only the outermost command boundary maps them to messages and exit codes
- No error triggers retries or compensation; recovery is re-invocation
"""

from typing import Optional, Sequence


class DeployError(Exception):
    """Base class for every failure the deployment pipeline reports."""

    exit_code = 1


class MissingConfiguration(DeployError):
    def __init__(self, message: str = "no configs found for meteor") -> None:
        super().__init__(message)


class InvalidSettings(DeployError):
    pass


class BuildCacheMiss(DeployError):
    def __init__(self, build_location: str) -> None:
        super().__init__(
            "Unable to use previous build. It doesn't exist at "
            f"{build_location}. Remove the \"--cached-build\" option and try again."
        )
        self.build_location = build_location


class BuildFailure(DeployError):
    pass


class SessionMismatch(DeployError):
    def __init__(self, server_name: str) -> None:
        super().__init__(f"No session available for server {server_name!r}")
        self.server_name = server_name


class ExecutionFailure(DeployError):
    def __init__(
        self, task_list_name: str, servers: Optional[Sequence[str]] = None
    ) -> None:
        message = f"{task_list_name} failed"
        if servers:
            message += f" on: {', '.join(servers)}"
        super().__init__(message)
        self.task_list_name = task_list_name
        self.servers = tuple(servers or ())
