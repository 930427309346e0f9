"""
Session Fan-out

Architectural Intent:
- Associates configured servers with sessions by server name
- Each pairing becomes its own single-task dispatch, so one server's
  failure never blocks another's
- A server without a session is a SessionMismatch, never an index error
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from pymup.domain.entities.deployment_config import ServerConfig
from pymup.domain.errors import MissingConfiguration, SessionMismatch
from pymup.domain.value_objects.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerSession:
    server_name: str
    server: ServerConfig
    session: Session


def pair_sessions(
    servers: Mapping[str, ServerConfig], sessions: Sequence[Session]
) -> list[ServerSession]:
    """Pair servers with sessions, in the servers' configured order."""
    by_name = {s.server_name: s for s in sessions}
    pairs: list[ServerSession] = []
    for name, server in servers.items():
        session = by_name.get(name)
        if session is None:
            raise SessionMismatch(name)
        pairs.append(ServerSession(name, server, session))

    unused = set(by_name) - set(servers)
    if unused:
        logger.debug("Sessions without a configured server: %s", sorted(unused))
    return pairs


def sessions_for(servers: Mapping[str, ServerConfig]) -> list[Session]:
    """Build one session per configured server.

    Raises:
        MissingConfiguration: a server's host, port or user is unusable.
    """
    sessions: list[Session] = []
    for name, server in servers.items():
        try:
            sessions.append(
                Session(
                    server_name=name,
                    host=server.host,
                    user=server.username,
                    port=server.port,
                    pem=server.pem,
                    password=server.password,
                )
            )
        except ValueError as e:
            raise MissingConfiguration(f"server {name!r}: {e}") from e
    return sessions
