"""
Task Value Objects

Architectural Intent:
- Descriptors of remote actions consumed by the task runner
- A task list is an ordered, immutable sequence built fresh per command
- Three kinds only: run a script, copy a file, run a raw command
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Optional, Union


@dataclass(frozen=True)
class ScriptTask:
    title: str
    script: str
    vars: Mapping[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return "script"


@dataclass(frozen=True)
class CopyTask:
    title: str
    src: str
    dest: str
    vars: Optional[Mapping[str, Any]] = None
    progress_bar: bool = False

    @property
    def kind(self) -> str:
        return "copy"


@dataclass(frozen=True)
class CommandTask:
    title: str
    command: str
    on_output: Optional[Callable[[str, str], None]] = field(
        default=None, compare=False
    )

    @property
    def kind(self) -> str:
        return "command"


Task = Union[ScriptTask, CopyTask, CommandTask]


@dataclass(frozen=True)
class TaskList:
    name: str
    tasks: tuple[Task, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Task list name cannot be empty")

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def titles(self) -> list[str]:
        return [t.title for t in self.tasks]
