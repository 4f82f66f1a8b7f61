"""Messages exchanged by the terminal shell and its commands.

A command is a callable taking no arguments and returning a message or ``None``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

Command = Callable[[], Any]


@dataclass(frozen=True)
class OutputMsg:
    text: str


@dataclass(frozen=True)
class FileContentsMsg:
    data: bytes


@dataclass(frozen=True)
class ClearOutputMsg:
    text: str = ""


@dataclass(frozen=True)
class HistoryListMsg:
    text: str = ""


@dataclass(frozen=True)
class SetRunningCmd:
    command: str


@dataclass(frozen=True)
class ListActiveUsersMsg:
    text: str = ""


@dataclass(frozen=True)
class ChangeDirMsg:
    path: str
    node: Any


@dataclass(frozen=True)
class TickMsg:
    time: datetime


@dataclass(frozen=True)
class KeyMsg:
    key: str


@dataclass(frozen=True)
class WindowSizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class QuitMsg:
    pass


@dataclass(frozen=True)
class _Batch:
    commands: tuple

    def __call__(self) -> list:
        messages: list = []
        for command in self.commands:
            result = command()
            if isinstance(result, list):
                messages.extend(result)
            elif result is not None:
                messages.append(result)
        return messages


def batch(*commands: Optional[Command]) -> Optional[Command]:
    """Combine commands into one; its result is the list of their messages."""
    present = tuple(command for command in commands if command is not None)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return _Batch(present)