"""One visitor's simulated shell session."""

from __future__ import annotations

import logging
import shlex
import sqlite3
import textwrap
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from honeybear.confetti import ConfettiModel
from honeybear.db import Database
from honeybear.events import Event, EventBus, EventSource
from honeybear.matrix import MatrixStop, initial_model
from honeybear.messages import (
    ChangeDirMsg,
    ClearOutputMsg,
    Command,
    FileContentsMsg,
    HistoryListMsg,
    KeyMsg,
    ListActiveUsersMsg,
    OutputMsg,
    QuitMsg,
    SetRunningCmd,
    TickMsg,
    WindowSizeMsg,
    batch,
)
from honeybear.node import Filesystem, FilesystemError
from honeybear.state import PotState

log = logging.getLogger(__name__)

FOOTER_HEIGHT = 2
INPUT_HEIGHT = 1
KNOCK_AFTER = timedelta(minutes=3)
HISTORY_LIST_MAX = 10
DEFAULT_HELP = "Type 'help' to see some commands; Use up/down for history."
CONFETTI_HELP = "Press 'q' to quit or any other key to make more confetti."
MATRIX_HELP = "Press 'ctrl + c' to quit."


@dataclass(frozen=True)
class _Style:
    codes: str = ""

    def render(self, text: str) -> str:
        if not self.codes:
            return text
        return "\n".join(f"\x1b[{self.codes}m{line}\x1b[0m" if line else line for line in text.split("\n"))


@dataclass
class _TextInput:
    prompt: str = "$ "
    placeholder: str = "Enter your command."
    char_limit: int = 200
    value: str = ""
    style: _Style = field(default_factory=_Style)

    def set_value(self, value: str) -> None:
        self.value = value[: self.char_limit]

    def reset(self) -> None:
        self.value = ""

    def update(self, msg: Any) -> None:
        if not isinstance(msg, KeyMsg):
            return
        if msg.key == "backspace":
            self.value = self.value[:-1]
        elif len(msg.key) == 1 and msg.key.isprintable() and len(self.value) < self.char_limit:
            self.value += msg.key

    def view(self) -> str:
        return self.style.render(self.prompt + (self.value or self.placeholder))


@dataclass
class _Viewport:
    width: int
    height: int
    lines: list = field(default_factory=lambda: [""])
    y_offset: int = 0

    def set_content(self, text: str) -> None:
        self.lines = text.split("\n")
        self.y_offset = min(self.y_offset, self._max_offset())

    def goto_top(self) -> None:
        self.y_offset = 0

    def _max_offset(self) -> int:
        return max(len(self.lines) - self.height, 0)

    def update(self, msg: Any) -> None:
        if not isinstance(msg, KeyMsg):
            return
        steps = {
            "up": -1,
            "k": -1,
            "down": 1,
            "j": 1,
            "pgup": -self.height,
            "b": -self.height,
            "pgdown": self.height,
            "f": self.height,
            " ": self.height,
        }
        step = steps.get(msg.key)
        if step is not None:
            self.y_offset = min(max(self.y_offset + step, 0), self._max_offset())

    def view(self, height: Optional[int] = None) -> str:
        rows = self.height if height is None else height
        visible = self.lines[self.y_offset : self.y_offset + max(rows, 0)]
        visible += [""] * (max(rows, 0) - len(visible))
        return "\n".join(visible)


def _wrap(text: str, width: int) -> str:
    if width <= 0:
        return text
    lines = []
    for line in text.split("\n"):
        lines.extend(
            textwrap.wrap(line, width, break_long_words=False, break_on_hyphens=False, replace_whitespace=False)
            or [""]
        )
    return "\n".join(lines)


def _place_top(text: str, height: int) -> str:
    lines = text.split("\n")
    lines += [""] * (height - len(lines))
    return "\n".join(lines)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ShellSession:
    """The interactive shell shown to one connected visitor."""

    def __init__(
        self,
        fs: Filesystem,
        user: str,
        host: str,
        *,
        state: Optional[PotState] = None,
        db: Optional[Database] = None,
        bus: Optional[EventBus] = None,
        group: str = "default",
        term: str = "",
        width: int = 80,
        height: int = 24,
        styled: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.fs = fs
        self.user = user
        self.host = host
        self.group = group
        self.term = term
        self.state = state
        self.db = db
        self.bus = bus
        self.width = width
        self.height = height
        self._clock = clock
        self.running_command = ""
        self.current_dir = fs.home
        self.txt_style = _Style("38;5;10" if styled else "")
        self.output_style = _Style("38;5;246" if styled else "")
        self.history_style = _Style("1;38;2;204;51;51" if styled else "")
        self.quit_style = _Style("38;5;8" if styled else "")
        self.text_input = _TextInput(style=self.txt_style)
        self.viewport = _Viewport(width, max(height - FOOTER_HEIGHT - INPUT_HEIGHT, 0))
        self.viewport_ready = False
        self.confetti = ConfettiModel()
        self.matrix = initial_model(width, height)
        self.help_text = DEFAULT_HELP
        self.events: dict[str, datetime] = {"session_start": clock()}
        self.output = ""
        self.history_idx = 0
        self.history: list[str] = []

    # Session lifecycle

    def init(self) -> Command:
        """Record the login and start the session clock."""
        try:
            self.new_event(True, "login", "Logged in!")
        except sqlite3.Error as exc:
            log.error("Error saving event: %s", exc)
        return self._do_tick()

    def _do_tick(self) -> Command:
        clock = self._clock

        def tick() -> TickMsg:
            time.sleep(1)
            return TickMsg(clock())

        return tick

    def update(self, msg: Any) -> tuple[ShellSession, Optional[Command]]:
        """Handle one message and return the follow-up command, if any."""
        cmds: list = []

        match msg:
            case TickMsg():
                return self, self._on_tick()
            case WindowSizeMsg(width=width, height=height):
                self._on_resize(width, height, msg)
            case FileContentsMsg(data=data):
                text = data.decode(errors="replace") if isinstance(data, (bytes, bytearray)) else str(data)
                self.viewport.set_content(self.output_style.render(_wrap(text, self.width - 10)))
                self.viewport.goto_top()
            case SetRunningCmd(command=command):
                self.running_command = command
            case OutputMsg(text=text):
                self.output += self.output_style.render("\n" + text + "\n")
            case ListActiveUsersMsg():
                self._list_users()
            case ClearOutputMsg():
                self.output = ""
            case ChangeDirMsg(path=path, node=node):
                self.current_dir = node
                self.output += self.output_style.render(f"\ncd {path}\n")
            case HistoryListMsg():
                for index, command in reversed(list(enumerate(self.history[:HISTORY_LIST_MAX]))):
                    self.output += self.output_style.render(f"\n{index}: {command}")
                self.output += self.output_style.render("\n")
            case KeyMsg(key="enter"):
                return self, self._on_enter(cmds)
            case KeyMsg(key="up"):
                if self.running_command == "":
                    self.text_input.set_value(self.history_peek())
                    self.history_inc()
            case KeyMsg(key="down"):
                if self.running_command == "":
                    self.text_input.set_value(self.history_peek())
                    self.history_dec()
            case KeyMsg(key="ctrl+c"):
                if self.running_command != "":
                    if self.running_command == "matrix":
                        self.matrix.update(MatrixStop())
                    self.viewport.set_content("")
                    self.running_command = ""
                return self, batch(*cmds)

        if self.running_command == "cat":
            self.viewport.update(msg)
        elif self.running_command == "confetti":
            _, cmd = self.confetti.update(msg)
            cmds.append(cmd)
        elif self.running_command == "matrix":
            _, cmd = self.matrix.update(msg)
            cmds.append(cmd)
        else:
            self.text_input.update(msg)

        return self, batch(*cmds)

    def _on_tick(self) -> Optional[Command]:
        cmds: list = []
        if self._clock() - self.events["session_start"] > KNOCK_AFTER and self.event_time("knock") is None:
            self.set_event_time("knock")

            def knock() -> OutputMsg:
                time.sleep(1)
                return OutputMsg("Knock, knock, Neo.")

            cmds.extend([lambda: ClearOutputMsg(""), knock])
        cmds.append(self._do_tick())
        return batch(*cmds)

    def _on_resize(self, width: int, height: int, msg: WindowSizeMsg) -> None:
        self.width = width
        self.height = height
        viewport_height = height - FOOTER_HEIGHT - INPUT_HEIGHT
        if not self.viewport_ready:
            self.viewport = _Viewport(width, viewport_height)
            self.viewport.set_content("")
            self.viewport_ready = True
        else:
            self.viewport.width = width
            self.viewport.height = viewport_height
        self.confetti.update(msg)
        self.matrix.update(msg)

    def _list_users(self) -> None:
        users = self.state.active_users() if self.state is not None else []
        self.output += (
            f"04:25:58 up 10 days, 23:21,  {len(users)} users,  load average: 0.10, 0.18, 0.10\n"
        )
        self.output += "USER\tTTY\tFROM\tLOGIN@\tIDLE\tJCPU\tPCPU WHAT\n"
        for index, name in enumerate(users):
            self.output += f"{name}\tpts/{index}\t--\t--\t--\t--\t--\n"

    def _on_enter(self, cmds: list) -> Optional[Command]:
        command = self.text_input.value
        log.debug("Command entered by %s:%s: %s", self.user, self.host, command)
        self.history_idx = 0
        self.set_event_time("enter")
        self.output += self.history_style.render(f"\n❯ {command}\n")

        try:
            parts = shlex.split(command)
        except ValueError as exc:
            self.output += self.output_style.render(f"\nError parsing command: {exc}\n")
            return batch(*cmds)

        if parts:
            self.history_push(command)
            try:
                self.new_event(True, "typed", command)
            except sqlite3.Error as exc:
                log.error("Error saving event: %s", exc)

            name = parts[0]
            if name == "exit":
                return lambda: QuitMsg()
            if name == "whoami":
                self.output += self.output_style.render(f"\n{self.user}\n")
            elif name == "sudo":
                if len(parts) > 1:
                    self._run(parts[1], parts[2:], "root", "root", cmds)
            else:
                self._run(name, parts[1:], self.user, self.group, cmds)

        self.text_input.reset()
        return batch(*cmds)

    def _run(self, path: str, params: list, user: str, group: str, cmds: list) -> None:
        try:
            new_cmd = self.fs.run_node(self.current_dir, path, params, user, group)
        except FilesystemError as exc:
            self.output += self.output_style.render(f"\n{exc}\n")
            return
        if new_cmd is not None:
            cmds.append(new_cmd)

    def view(self) -> str:
        """Render the whole screen."""
        if not self.viewport_ready:
            return "\nInitializing...\n"

        content_height = self.height - FOOTER_HEIGHT - INPUT_HEIGHT
        help_text = self.help_text

        if self.running_command == "cat":
            return (
                self.viewport.view(self.height - FOOTER_HEIGHT)
                + "\n"
                + self.quit_style.render("ctrl + c to exit this file.\n")
            )
        if self.running_command == "confetti":
            content = self.confetti.view()
            help_text = CONFETTI_HELP
        elif self.running_command == "matrix":
            content = self.matrix.view()
            help_text = MATRIX_HELP
        else:
            content = self.txt_style.render(_place_top(self.output, content_height))

        return f"{content}\n{self.text_input.view()}\n{self.quit_style.render(help_text)}\n"

    # Session timing

    def event_time(self, event: str) -> Optional[datetime]:
        return self.events.get(event)

    def set_event_time(self, event: str) -> None:
        self.events[event] = self._clock()

    # Command history, newest first

    def history_push(self, command: str) -> None:
        self.history.insert(0, command)

    def history_peek(self) -> str:
        if self.history_idx >= len(self.history):
            return ""
        return self.history[self.history_idx]

    def history_inc(self) -> None:
        if self.history_idx >= len(self.history) - 1:
            return
        self.history_idx += 1

    def history_dec(self) -> None:
        if self.history_idx == 0:
            return
        self.history_idx -= 1

    def new_event(self, user_event: bool, event_type: str, action: str) -> Event:
        """Publish an event for this session and store it."""
        source = EventSource.USER if user_event else EventSource.SYSTEM
        event = Event(
            user=self.user,
            host=self.host,
            app="ssh",
            source=source.value,
            type=event_type,
            action=action,
            timestamp=self._clock(),
        )
        if self.bus is not None:
            self.bus.publish(event)
        if self.db is not None:
            event.save(self.db)
        return event