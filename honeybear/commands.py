"""The programs available inside the simulated shell.

Each takes the file tree, the current directory and the arguments, and
returns a command producing the messages for the shell.
"""

from __future__ import annotations

import random
import time

from honeybear import matrix as matrix_animation
from honeybear.messages import (
    ChangeDirMsg,
    ClearOutputMsg,
    Command,
    FileContentsMsg,
    HistoryListMsg,
    ListActiveUsersMsg,
    OutputMsg,
    SetRunningCmd,
    batch,
)
from honeybear.node import Filesystem, FilesystemError, Node

BEAR_SAY_DEFAULTS = (
    "Hello, world!",
    "You're in!",
    "I don't play well with others",
    "Hack the planet!",
    "Its in the place that I put that thing that time.",
    "Stay curious!",
)

_BEAR_ART = (
    "  __         __",
    ' /  \\.-"""-./  \\',
    "\\    -   -    /",
    " |   o   o   |",
    " \\  .-'''-.  /",
    "  '-\\__Y__/-'",
    "     '---'",
    "      (\\__/)",
    "      (='.'=)",
    '      (")_(")',
)

_INDENT = "\t\t\t\t"

UNAME_SYSTEM = "Linux"
UNAME_NODE = "Hardhat"
UNAME_RELEASE = "6.22.0-81-generic"
UNAME_VERSION = "#148-HardHat SMP Fri Mar 14 19:05:48 UTC 2025"
UNAME_MACHINE = "x86_64"
UNAME_OS = "Hardhat Linux"

DEFAULT_HOME = "/home/you"


def _bear_art(message: str) -> str:
    art = "".join(_INDENT + line + "\n" for line in _BEAR_ART)
    return "\n" + art + "\n" + _INDENT + message + "\n\n\t\t\t"


def _running(name: str) -> Command:
    return lambda: SetRunningCmd(name)


def bear_say(fs: Filesystem, directory: Node, params: list) -> Command:
    """Draw a bear saying the arguments, or a random greeting."""

    def say() -> OutputMsg:
        message = " ".join(params) if params else random.choice(BEAR_SAY_DEFAULTS)
        return OutputMsg(_bear_art(message))

    return batch(_running("bearsay"), say)


def cat(fs: Filesystem, directory: Node, params: list) -> Command:
    """Show a file in the pager."""

    def read():
        if not params:
            return OutputMsg("cat: missing file operand")
        try:
            target = fs.get_node_by_path(directory, params[0])
        except FilesystemError as exc:
            return OutputMsg(str(exc))
        try:
            return FileContentsMsg(target.open())
        except FilesystemError as exc:
            return OutputMsg(f"cat: {exc}")

    return batch(_running("cat"), read)


def ls(fs: Filesystem, directory: Node, params: list) -> Command:
    """List a directory; -l puts one entry per line, -a shows hidden entries."""

    def listing() -> OutputMsg:
        separator = "\t"
        target = "."
        show_hidden = False
        for param in params:
            if param.startswith("-"):
                if "l" in param:
                    separator = "\n"
                if "a" in param:
                    show_hidden = True
            else:
                target = param
        try:
            node = fs.get_node_by_path(directory, target)
        except FilesystemError:
            return OutputMsg(f"ls: cannot access '{target}': No such file or directory")
        if not node.is_directory():
            return OutputMsg("")
        return OutputMsg(
            "".join(
                child.name + separator
                for child in node.children
                if show_hidden or not child.name.startswith(".")
            )
        )

    return listing


def who(fs: Filesystem, directory: Node, params: list) -> Command:
    return lambda: ListActiveUsersMsg("")


def clear(fs: Filesystem, directory: Node, params: list) -> Command:
    return lambda: ClearOutputMsg("")


def echo(fs: Filesystem, directory: Node, params: list) -> Command:
    text = " ".join(params)
    return lambda: OutputMsg(text)


def ping(fs: Filesystem, directory: Node, params: list) -> Command:
    return lambda: OutputMsg("Pong!")


def man(fs: Filesystem, directory: Node, params: list) -> Command:
    return lambda: OutputMsg("No man. Just use -h or --help on the command you want to learn about.")


def help_command(fs: Filesystem, directory: Node, params: list) -> Command:
    """Show the help file in the pager."""

    def read() -> FileContentsMsg:
        try:
            if fs.embedded_dir is None:
                raise FileNotFoundError("help.txt")
            data = (fs.embedded_dir / "help.txt").read_bytes()
        except OSError:
            data = b"\nError reading file.\n"
        return FileContentsMsg(data)

    return batch(_running("cat"), read)


def pwd(fs: Filesystem, directory: Node, params: list) -> Command:
    path = directory.path
    return lambda: OutputMsg(path)


def history(fs: Filesystem, directory: Node, params: list) -> Command:
    return lambda: HistoryListMsg("")


def celebrate(fs: Filesystem, directory: Node, params: list) -> Command:
    """Run the confetti animation for a few seconds."""

    def fire():
        time.sleep(0.1)
        from honeybear import confetti

        return confetti.burst()

    def finish() -> SetRunningCmd:
        time.sleep(4)
        return SetRunningCmd("")

    return batch(_running("confetti"), fire, finish)


def matrix_command(fs: Filesystem, directory: Node, params: list) -> Command:
    """Start the digital rain animation."""

    def begin():
        time.sleep(0.1)
        return matrix_animation.start()

    return batch(_running("matrix"), begin)


def cd(fs: Filesystem, directory: Node, params: list) -> Command:
    """Change the working directory, home by default."""

    def change():
        new_path = params[0] if params else DEFAULT_HOME
        try:
            node = fs.get_node_by_path(directory, new_path)
        except FilesystemError as exc:
            return OutputMsg(str(exc))
        return ChangeDirMsg(path=new_path, node=node)

    return change


def uname(fs: Filesystem, directory: Node, params: list) -> Command:
    """Print system information."""
    fields = {
        "-s": UNAME_SYSTEM,
        "-n": UNAME_NODE,
        "-r": UNAME_RELEASE,
        "-v": UNAME_VERSION,
        "-m": UNAME_MACHINE,
        "-p": UNAME_MACHINE,
        "-i": UNAME_MACHINE,
        "-o": UNAME_OS,
    }
    output = []
    if not params:
        output.append(UNAME_OS)
    for param in params:
        if param == "-a":
            output.append(
                " ".join((UNAME_SYSTEM, UNAME_NODE, UNAME_RELEASE, UNAME_VERSION, UNAME_MACHINE, UNAME_OS))
            )
        elif param in fields:
            output.append(fields[param])
        else:
            output = [f"uname: invalid option -- '{param}'"]
    text = " ".join(output)
    return lambda: OutputMsg(text)


_LSB_OPTIONS = {
    "-a": "Distributor ID: Hardhat\nDescription: Hardhat Linux 1.0\nRelease: 1.0\nCodename: hardhat",
    "-d": "Description: Hardhat Linux 1.0",
    "-r": "Release: 1.0",
    "-c": "Codename: hardhat",
    "-i": "Distributor ID: Hardhat",
    "-s": "Hardhat",
    "-v": "Hardhat Linux 1.0",
}


def lsb_release(fs: Filesystem, directory: Node, params: list) -> Command:
    """Print distribution information for the first option given."""

    def release() -> OutputMsg:
        if not params:
            return OutputMsg("No LSB modules are available.")
        option = params[0]
        if option in _LSB_OPTIONS:
            return OutputMsg(_LSB_OPTIONS[option])
        return OutputMsg(f"lsb_release: invalid option -- '{option}'")

    return release