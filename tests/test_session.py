from datetime import timedelta

import pytest

from honeybear.db import open_database
from honeybear.events import EventBus, event_initialization, event_query
from honeybear.messages import (
    ClearOutputMsg,
    HistoryListMsg,
    KeyMsg,
    ListActiveUsersMsg,
    OutputMsg,
    QuitMsg,
    TickMsg,
    WindowSizeMsg,
)
from honeybear.options import option_initialization
from honeybear.session import DEFAULT_HELP, ShellSession
from honeybear.state import PotState
from honeybear.tree import build_filesystem


@pytest.fixture
def fs(tmp_path):
    embedded = tmp_path / "embedded"
    embedded.mkdir()
    (embedded / "test.txt").write_text("hello from the note")
    (embedded / "help.txt").write_text("some help")
    return build_filesystem(embedded)


@pytest.fixture
def session(fs):
    return ShellSession(fs, "visitor", "127.0.0.1:5555", styled=False)


def _messages(cmd):
    result = cmd()
    return result if isinstance(result, list) else [result]


def _type(session, text):
    for char in text:
        session.update(KeyMsg(char))
    return session.update(KeyMsg("enter"))[1]


def _feed(session, cmd):
    for message in _messages(cmd):
        session.update(message)


def test_view_before_resize(session):
    assert session.view() == "\nInitializing...\n"


def test_view_after_resize(session):
    session.update(WindowSizeMsg(80, 24))
    screen = session.view()
    assert screen.endswith(DEFAULT_HELP + "\n")
    assert "$ " in screen


def test_echo_produces_output(session):
    cmd = _type(session, "echo hi")
    _feed(session, cmd)
    assert session.output.endswith("\nhi\n")
    assert session.text_input.value == ""
    assert session.history == ["echo hi"]


def test_whoami(session):
    assert _type(session, "whoami") is None
    assert "\nvisitor\n" in session.output


def test_unknown_command(session):
    _type(session, "nosuchcmd")
    assert "nosuchcmd: command not found" in session.output


def test_parse_error_keeps_input(session):
    _type(session, 'echo "oops')
    assert "Error parsing command" in session.output
    assert session.text_input.value == 'echo "oops'
    assert session.history == []


def test_exit_quits(session):
    cmd = _type(session, "exit")
    assert cmd() == QuitMsg()


def test_sudo_without_command(session):
    assert _type(session, "sudo") is None
    assert session.history == ["sudo"]


def test_cd_changes_directory(session):
    _feed(session, _type(session, "cd /etc"))
    assert session.current_dir.path == "/etc"
    assert "cd /etc" in session.output


def test_clear_message(session):
    session.update(OutputMsg("something"))
    session.update(ClearOutputMsg(""))
    assert session.output == ""


def test_cat_shows_file_and_ctrl_c_leaves(session):
    session.update(WindowSizeMsg(80, 24))
    _feed(session, _type(session, "cat test.txt"))
    assert session.running_command == "cat"
    screen = session.view()
    assert "hello from the note" in screen
    assert "ctrl + c to exit this file." in screen
    session.update(KeyMsg("ctrl+c"))
    assert session.running_command == ""
    assert "hello from the note" not in session.viewport.view()


def test_history_list(session):
    session.history_push("a")
    session.history_push("b")
    session.update(HistoryListMsg())
    assert session.output == "\n1: a\n0: b\n"


def test_history_navigation(session):
    for command in ("a", "b", "c"):
        session.history_push(command)
    assert session.history_peek() == "c"
    session.history_inc()
    assert session.history_peek() == "b"
    session.history_inc()
    session.history_inc()
    assert session.history_peek() == "a"
    session.history_dec()
    assert session.history_peek() == "b"
    session.history_dec()
    session.history_dec()
    assert session.history_peek() == "c"


def test_history_peek_empty(session):
    assert session.history_peek() == ""


def test_up_key_recalls_history(session):
    _type(session, "whoami")
    session.update(KeyMsg("up"))
    assert session.text_input.value == "whoami"


def test_list_active_users(fs):
    state = PotState()
    state.add_user("alice")
    state.add_user("bob")
    session = ShellSession(fs, "visitor", "h", state=state, styled=False)
    session.update(ListActiveUsersMsg())
    assert "2 users" in session.output
    assert "alice\tpts/0" in session.output
    assert "bob\tpts/1" in session.output


def test_init_records_login(fs, tmp_path):
    db = open_database(tmp_path, event_initialization(), option_initialization())
    bus = EventBus()
    subscription = bus.subscribe("test")
    session = ShellSession(fs, "visitor", "h", db=db, bus=bus, styled=False)
    session.init()
    published = subscription.get_nowait()
    assert (published.type, published.source, published.app) == ("login", "user", "ssh")
    stored = event_query(db, "SELECT * FROM events")
    assert [event.action for event in stored] == ["Logged in!"]
    db.close()


def test_typed_command_recorded(fs, tmp_path):
    db = open_database(tmp_path, event_initialization(), option_initialization())
    session = ShellSession(fs, "visitor", "h", db=db, styled=False)
    _type(session, "whoami")
    stored = event_query(db, "SELECT * FROM events WHERE type = 'typed'")
    assert [event.action for event in stored] == ["whoami"]
    db.close()


def test_tick_before_knock_time(session):
    session.update(TickMsg(session.event_time("session_start")))
    assert session.event_time("knock") is None
    assert "knock" not in session.events


def test_tick_knocks_once(session):
    start = session.event_time("session_start")
    session.events["session_start"] = start - timedelta(minutes=4)
    session.update(TickMsg(start))
    knock = session.event_time("knock")
    assert knock >= start
    session.update(TickMsg(start))
    assert session.event_time("knock") == knock


def test_set_event_time(session):
    session.set_event_time("enter")
    assert session.event_time("enter") >= session.event_time("session_start")
    assert session.event_time("missing") is None