from functools import partial
from unittest import mock

import pytest

from honeybear import commands
from honeybear.matrix import MatrixTick
from honeybear.messages import (
    ChangeDirMsg,
    ClearOutputMsg,
    FileContentsMsg,
    HistoryListMsg,
    ListActiveUsersMsg,
    OutputMsg,
    SetRunningCmd,
)
from honeybear.node import Filesystem, Node


@pytest.fixture
def fs():
    filesystem = Filesystem()
    note = Node(name="test.txt", path="/home/you/test.txt", owner="you", group="default", mode=0o644,
                content=lambda: b"note")
    ssh = Node(name=".ssh", path="/home/you/.ssh", directory=True, owner="root", group="root", mode=0o755)
    you = Node(name="you", path="/home/you", directory=True, children=[note, ssh], owner="you", group="default")
    home = Node(name="home", path="/home", directory=True, children=[you])
    echo = Node(name="echo", path="/usr/bin/echo", owner="root", group="root", mode=0o711,
                help_text="echo help", handler=partial(commands.echo, filesystem))
    bin_dir = Node(name="bin", path="/usr/bin", directory=True, children=[echo])
    usr = Node(name="usr", path="/usr", directory=True, children=[bin_dir])
    filesystem.root = Node(name="", path="/", directory=True, children=[home, usr])
    filesystem.home = you
    return filesystem


def test_echo_joins_params(fs):
    assert commands.echo(fs, fs.home, ["a", "b"])() == OutputMsg("a b")


def test_simple_messages(fs):
    assert commands.ping(fs, fs.home, [])() == OutputMsg("Pong!")
    assert commands.who(fs, fs.home, [])() == ListActiveUsersMsg("")
    assert commands.clear(fs, fs.home, [])() == ClearOutputMsg("")
    assert commands.history(fs, fs.home, [])() == HistoryListMsg("")
    assert commands.man(fs, fs.home, [])().text.startswith("No man.")


def test_pwd(fs):
    assert commands.pwd(fs, fs.home, [])() == OutputMsg(fs.home.path)


def test_ls_hides_dotfiles(fs):
    assert commands.ls(fs, fs.home, [])() == OutputMsg("test.txt\t")


def test_ls_all_and_long(fs):
    text = commands.ls(fs, fs.home, ["-la"])().text
    assert text.split("\n")[:-1] == ["test.txt", ".ssh"]
    assert text.endswith("\n")


def test_ls_other_directory_and_missing(fs):
    assert commands.ls(fs, fs.home, ["/usr"])() == OutputMsg("bin\t")
    assert commands.ls(fs, fs.home, ["nope"])() == OutputMsg(
        "ls: cannot access 'nope': No such file or directory"
    )


def test_cat_outputs(fs):
    assert commands.cat(fs, fs.home, [])() == [SetRunningCmd("cat"), OutputMsg("cat: missing file operand")]
    assert commands.cat(fs, fs.home, ["test.txt"])()[1] == FileContentsMsg(b"note")
    assert commands.cat(fs, fs.home, [".ssh"])()[1] == OutputMsg("cat: not a file")
    assert commands.cat(fs, fs.home, ["missing"])()[1] == OutputMsg("not found")


def test_cd(fs):
    home_dir = fs.home
    assert commands.cd(fs, fs.root, [])() == ChangeDirMsg(path="/home/you", node=home_dir)
    moved = commands.cd(fs, home_dir, [".."])()
    assert moved.node.path == "/home"
    assert commands.cd(fs, home_dir, ["nowhere"])() == OutputMsg("not found")


def test_uname(fs):
    assert commands.uname(fs, fs.home, [])() == OutputMsg("Hardhat Linux")
    assert commands.uname(fs, fs.home, ["-s", "-r"])() == OutputMsg("Linux 6.22.0-81-generic")
    assert commands.uname(fs, fs.home, ["-x"])() == OutputMsg("uname: invalid option -- '-x'")
    everything = commands.uname(fs, fs.home, ["-a"])().text
    assert everything.startswith("Linux Hardhat") and everything.endswith("x86_64 Hardhat Linux")


def test_lsb_release(fs):
    assert commands.lsb_release(fs, fs.home, [])() == OutputMsg("No LSB modules are available.")
    assert commands.lsb_release(fs, fs.home, ["-c", "-r"])() == OutputMsg("Codename: hardhat")
    assert commands.lsb_release(fs, fs.home, ["-q"])() == OutputMsg("lsb_release: invalid option -- '-q'")


def test_bear_say_with_message(fs):
    running, output = commands.bear_say(fs, fs.home, ["hi", "there"])()
    assert running == SetRunningCmd("bearsay")
    assert "hi there" in output.text
    assert "(='.'=)" in output.text


def test_bear_say_default_message(fs):
    _, output = commands.bear_say(fs, fs.home, [])()
    assert any(message in output.text for message in commands.BEAR_SAY_DEFAULTS)


def test_help_reads_embedded_file(fs, tmp_path):
    (tmp_path / "help.txt").write_bytes(b"some help")
    fs.embedded_dir = tmp_path
    assert commands.help_command(fs, fs.home, [])() == [SetRunningCmd("cat"), FileContentsMsg(b"some help")]


def test_help_missing_file(fs, tmp_path):
    fs.embedded_dir = tmp_path
    assert commands.help_command(fs, fs.home, [])()[1] == FileContentsMsg(b"\nError reading file.\n")


@mock.patch("time.sleep")
def test_matrix_command(sleep, fs):
    assert commands.matrix_command(fs, fs.home, [])() == [SetRunningCmd("matrix"), MatrixTick()]
    sleep.assert_called_once_with(0.1)


def test_command_run_through_filesystem(fs):
    assert fs.run_node(fs.home, "echo", ["x"], "you", "default")() == OutputMsg("x")
    assert fs.run_node(fs.home, "echo", ["-h"], "you", "default")() == OutputMsg("echo help")