"""
Command DTOs

Architectural Intent:
- Data Transfer Objects crossing the use case boundary
- Carries the raw project config and invocation options into a command
- Decouples CLI/file loading from the deployment core
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from pymup.domain.value_objects.session import Session


def _no_settings() -> Mapping[str, Any]:
    return {}


@dataclass(frozen=True)
class CommandContext:
    raw_config: Optional[Mapping[str, Any]]
    base_path: str = "."
    settings_loader: Callable[[], Mapping[str, Any]] = _no_settings
    sessions: Optional[tuple[Session, ...]] = None
    verbose: bool = False
    cached_build: bool = False

    def __post_init__(self) -> None:
        if not self.base_path:
            raise ValueError("base_path cannot be empty")

    def load_settings(self) -> Mapping[str, Any]:
        return self.settings_loader()
