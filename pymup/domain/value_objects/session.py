"""
Session Value Object

Architectural Intent:
- Immutable execution context bound to exactly one target host
- Keyed by the configured server name so fan-out can associate by name
- Validates hostname format (DNS, IPv4, IPv6), port bounds, non-empty user
"""

import re
from dataclasses import dataclass, field
from typing import Optional

# RFC 1123 hostname: labels of alnum/hyphens, dot-separated
_HOSTNAME_RE = re.compile(
    r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.[A-Za-z0-9-]{1,63})*$"
)

_IPV4_RE = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")

_IPV6_RE = re.compile(r"^[0-9a-fA-F:]+$")


def is_valid_host(host: str) -> bool:
    """Validate host as DNS name, IPv4, or IPv6."""
    if not host:
        return False

    m = _IPV4_RE.match(host)
    if m:
        return all(0 <= int(g) <= 255 for g in m.groups())

    if _IPV6_RE.match(host) and ":" in host:
        return True

    return bool(_HOSTNAME_RE.match(host)) and len(host) <= 253


@dataclass(frozen=True)
class Session:
    """
    Value Object for a connection to one configured server.
    """
    server_name: str
    host: str
    user: str = "root"
    port: int = 22
    pem: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.server_name:
            raise ValueError("Session server name cannot be empty")
        if not self.user:
            raise ValueError("Session user cannot be empty")
        if not (1 <= self.port <= 65535):
            raise ValueError(f"Port must be 1-65535, got {self.port}")
        if not is_valid_host(self.host):
            raise ValueError(f"Invalid hostname: {self.host!r}")

    def __str__(self) -> str:
        return f"{self.server_name} ({self.user}@{self.host}:{self.port})"
