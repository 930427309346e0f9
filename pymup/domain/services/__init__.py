"""
Domain Services

Architectural Intent:
- Pure decision logic of the deployment pipeline
- Config resolution, task list construction, session pairing
"""

from pymup.domain.services.config_resolver import resolve_config
from pymup.domain.services.session_fanout import (
    ServerSession,
    pair_sessions,
    sessions_for,
)
from pymup.domain.services.task_list_builder import (
    TaskListBuilder,
    build_environment,
)

__all__ = [
    "resolve_config",
    "ServerSession",
    "pair_sessions",
    "sessions_for",
    "TaskListBuilder",
    "build_environment",
]
