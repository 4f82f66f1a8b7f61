import pytest

from honeybear.db import open_database
from honeybear.events import Event, event_initialization
from honeybear.options import KEY_POT_MAX_USERS, option_initialization, option_set
from honeybear.state import (
    DEFAULT_MAX_USERS,
    PotState,
    TunnelConfig,
    TunnelStatus,
    parse_tunnel,
)


@pytest.fixture
def db(tmp_path):
    database = open_database(tmp_path, event_initialization(), option_initialization())
    yield database
    database.close()


def _login(db, source="user"):
    Event(user="visitor", host="h", app="ssh", source=source, type="login", action="Logged in!").save(db)


def test_parse_tunnel_with_port():
    config = parse_tunnel("tunnel@example.com:2200", "/keys/id")
    assert config == TunnelConfig(user="tunnel", addr="example.com", key_path="/keys/id", port="2200")


def test_parse_tunnel_default_port():
    config = parse_tunnel("tunnel@example.com", "/keys/id")
    assert config.addr == "example.com"
    assert config.port == "22"
    assert config.remote_forward_port == "8022"


@pytest.mark.parametrize("host,key", [("", "/keys/id"), ("a@b", ""), (None, None)])
def test_parse_tunnel_unset(host, key):
    assert parse_tunnel(host, key) is None


def test_parse_tunnel_invalid():
    with pytest.raises(ValueError, match="Invalid remote host"):
        parse_tunnel("example.com", "/keys/id")


def test_tunnel_status_defaults_to_not_configured():
    state = PotState()
    state.set_tunnel("", "")
    assert state.tunnel_status == TunnelStatus.NOT_CONFIGURED
    assert state.tunnel_status == -1


def test_set_tunnel_configures():
    state = PotState()
    state.set_tunnel("tunnel@example.com", "/keys/id")
    assert state.tunnel_status == TunnelStatus.DISCONNECTED
    assert state.tunnel.user == "tunnel"


def test_set_tunnel_invalid_marks_disconnected():
    state = PotState()
    with pytest.raises(ValueError):
        state.set_tunnel("example.com", "/keys/id")
    assert state.tunnel_status == TunnelStatus.DISCONNECTED


def test_set_port():
    state = PotState()
    state.set_port("1337")
    assert state.port == "1337"


def test_add_and_remove_users():
    state = PotState()
    for user in ("alice", "bob", "alice"):
        state.add_user(user)
    state.remove_user("alice")
    assert state.active_users() == ["bob", "alice"]
    state.remove_user("nobody")
    assert state.active_users() == ["bob", "alice"]


def test_max_users_default(db):
    assert PotState(db).max_users() == DEFAULT_MAX_USERS
    assert PotState().max_users() == DEFAULT_MAX_USERS


def test_max_users_from_option(db):
    option_set(db, KEY_POT_MAX_USERS, "3")
    assert PotState(db).max_users() == 3


def test_authorize_counts_and_limits(db):
    option_set(db, KEY_POT_MAX_USERS, "2")
    state = PotState(db)
    password = "password"
    assert state.authorize("alice", password) is True
    state.add_user("alice")
    assert state.authorize("bob", password) is True
    state.add_user("bob")
    assert state.authorize("carol", password) is False
    assert state.users_this_session == 2


def test_users_all_time_counts_user_logins(db):
    _login(db)
    _login(db)
    _login(db, source="system")
    assert PotState(db).users_all_time() == 2


def test_users_all_time_is_cached(db):
    now = [100.0]
    state = PotState(db, clock=lambda: now[0])
    _login(db)
    first = state.users_all_time()
    _login(db)
    assert state.users_all_time() == first
    now[0] += 11
    assert state.users_all_time() == first + 1


def test_users_all_time_without_db():
    assert PotState().users_all_time() == 0