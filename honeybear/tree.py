"""The simulated machine's file tree."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Optional

from honeybear import commands
from honeybear.node import Filesystem, Node

SYSTEM_PATH = "/usr/bin/"

OS_RELEASE = (
    b'PRETTY_NAME="Hardhat Linux"\nNAME="Hardhat Linux"\nID=hardhat\nID_LIKE=debian\n'
    b'VERSION_ID="1.0"\nVERSION="1.0"\nVERSION_CODENAME="hardhat"\n'
)

CAT_HELP = "Usage: cat [FILE]\n Displays the contents of a file."

_PROGRAMS = (
    ("ls", commands.ls,
     "Usage: ls [OPTION]... [FILE]...\n List information about the FILEs (the current directory by default)."),
    ("w", commands.who, "w - Show who is logged on and what they are doing."),
    ("clear", commands.clear, "Usage: clear\n Clear the terminal screen."),
    ("bearsay", commands.bear_say, "Usage: clear\n Clear the terminal screen."),
    ("cowsay", commands.bear_say, "configurable speaking/thinking bear (and a bit more)"),
    ("echo", commands.echo, "configurable speaking/thinking bear (and a bit more)"),
    ("ping", commands.ping, "Usage: ping\n Send a ping, get a pong."),
    ("man", commands.man, "Usage: man [COMMAND]\n Display the manual page for a command."),
    ("help", commands.help_command, "Usage: help\n Display this help text."),
    ("pwd", commands.pwd, "Usage: pwd\n Print the name of the current working directory."),
    ("history", commands.history, "Usage: history\n Display the command history."),
    ("cat", commands.cat, CAT_HELP),
    ("less", commands.cat, CAT_HELP),
    ("more", commands.cat, CAT_HELP),
    ("celebrate", commands.celebrate, ""),
    ("matrix", commands.matrix_command, ""),
    ("cd", commands.cd, "Usage: cd [DIRECTORY]\n Change the shell working directory."),
    ("uname", commands.uname, "Usage: uname [OPTION]...\n Print system information."),
    ("lsb_release", commands.lsb_release, "w - Show who is logged on and what they are doing."),
)


def new_directory(path: str, *children: Node) -> Node:
    """A root-owned directory holding ``children``."""
    return Node(
        name=path.split("/")[-1],
        path=path,
        owner="root",
        group="root",
        mode=0o755,
        directory=True,
        children=list(children),
    )


def new_file(path: str, content: bytes, mode: int) -> Node:
    """A root-owned file with fixed contents."""
    data = bytes(content)
    return Node(
        name=path.split("/")[-1],
        path=path,
        owner="root",
        group="root",
        directory=False,
        content=lambda: data,
        mode=mode,
    )


def _program(fs: Filesystem, name: str, handler, help_text: str) -> Node:
    return Node(
        name=name,
        path=f"/usr/bin/{name}",
        directory=False,
        owner="root",
        group="root",
        mode=0o711,
        help_text=help_text,
        handler=partial(handler, fs),
    )


def _embedded_reader(embedded: Optional[Path], filename: str):
    def read() -> bytes:
        try:
            if embedded is None:
                raise FileNotFoundError(filename)
            return (embedded / filename).read_bytes()
        except OSError as exc:
            return f"\n{exc}: Error reading file.\n".encode()

    return read


def build_filesystem(embedded_dir: str | Path | None) -> Filesystem:
    """Build the whole tree; embedded text files are read from ``embedded_dir``."""
    embedded = Path(embedded_dir) if embedded_dir is not None else None
    fs = Filesystem(system_path=[SYSTEM_PATH], embedded_dir=embedded)

    home = Node(
        name="you",
        path="/home/you",
        directory=True,
        children=[
            Node(
                name="test.txt",
                path="/home/you/test.txt",
                directory=False,
                owner="you",
                group="default",
                mode=0o644,
                content=_embedded_reader(embedded, "test.txt"),
            ),
            new_directory("/home/you/.ssh"),
        ],
        owner="you",
        group="default",
    )

    bin_dir = Node(
        name="bin",
        path="/usr/bin",
        directory=True,
        children=[_program(fs, name, handler, help_text) for name, handler, help_text in _PROGRAMS],
        owner="root",
        group="root",
    )
    usr = Node(
        name="usr",
        path="/usr",
        directory=True,
        children=[
            bin_dir,
            Node(name="local", path="/usr/local", directory=True, children=[], owner="root", group="root"),
        ],
        owner="root",
        group="root",
    )
    root = Node(
        name="",
        path="/",
        directory=True,
        children=[
            new_directory("/opt"),
            new_directory("/root"),
            new_directory("/var"),
            new_directory("/tmp"),
            new_directory("/etc", new_file("/etc/os-release", OS_RELEASE, 0o644)),
            usr,
            Node(name="home", path="/home", directory=True, children=[home], owner="root", group="root"),
        ],
        owner="root",
        group="root",
    )

    fs.root = root
    fs.home = home
    return fs