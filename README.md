# honeybear

The pieces of an SSH honey pot that looks like a small Linux box: a fake
shell with a made-up filesystem, storage of every login and typed command
in SQLite, live statistics, and a touch-screen window with a bear whose
mood follows the activity.

## Install

    pip install .

The display (`honeybear.window`, `honeybear.admin`) uses `tkinter` from the
standard library and Pillow for images.

## What is in the package

- `honeybear.db` – `open_database(dir, *init_queries)` opens
  `database.db` in a directory (which must already exist) and returns a
  thread-safe `Database` with `query`, `write` and `close`.
- `honeybear.events` – the `events` table (`event_initialization()`),
  the `Event` record with `save(db)`, `event_query` / `event_count_query`,
  and `EventBus` for in-process subscribers (`subscribe`, `unsubscribe`,
  `publish`).
- `honeybear.options` – the `options` table (`option_initialization()`),
  `option_get`, `option_get_int`, `option_set`; keys such as `gui_pin` and
  `pot_max_users`.
- `honeybear.tree.build_filesystem(embedded_dir)` – the fake machine's file
  tree (`/etc/os-release`, `/home/you`, `/usr/bin` …). `test.txt` and
  `help.txt` are read from `embedded_dir`; with `None` they show an error
  text instead.
- `honeybear.node` – `Node`, `Filesystem` (path lookup, permission checks,
  `run_node`) and `FilesystemError`.
- `honeybear.commands` – the shell's programs: `ls`, `cd`, `pwd`, `cat`
  (also `less`, `more`), `echo`, `ping`, `man`, `help`, `history`, `w`,
  `clear`, `uname`, `lsb_release`, `bearsay`/`cowsay`, `celebrate`
  (confetti) and `matrix` (digital rain).
- `honeybear.session.ShellSession` – one visitor's shell. Feed it messages
  from `honeybear.messages` (`KeyMsg`, `WindowSizeMsg`, …) through
  `update`, run the command it returns, feed the resulting messages back,
  and draw it with `view`. `exit` returns a command yielding `QuitMsg`;
  `whoami` and `sudo` are handled by the session itself.
- `honeybear.state.PotState` – connected users, the maximum user count,
  the cached all-time login count, and the reverse tunnel settings parsed
  by `parse_tunnel("user@host[:port]", key_path)`.
- `honeybear.reports` – the admin statistics: `user_counts`,
  `rare_commands`, `top_commands`, `top_users`, `recent_events`.
- `honeybear.window.start_gui(state, db, bus, fullscreen, width, height)`
  – the bear display (default 800×480) with user counts, recent-command
  notifications, an about box and the PIN-protected admin menu from
  `honeybear.admin` (default PIN `1234`). Bear pictures are read from an
  `assets` folder next to `honeybear/window.py`; a picture that cannot be
  read is simply not drawn.

## Example: driving the shell

```python
from pathlib import Path

from honeybear.db import open_database
from honeybear.events import EventBus, event_initialization
from honeybear.messages import KeyMsg, WindowSizeMsg
from honeybear.options import option_initialization
from honeybear.session import ShellSession
from honeybear.tree import build_filesystem

data_dir = Path("honeybear-data")
data_dir.mkdir(exist_ok=True)
db = open_database(data_dir, event_initialization(), option_initialization())

session = ShellSession(build_filesystem(None), "visitor", "203.0.113.5:4242",
                       db=db, bus=EventBus(), styled=False)
session.init()  # stores the login event; the returned command is the 1 s tick
session.update(WindowSizeMsg(80, 24))


def run(cmd):
    if cmd is None:
        return
    result = cmd()
    for msg in result if isinstance(result, list) else [result]:
        if msg is not None:
            session.update(msg)


for key in "uname -a":
    session.update(KeyMsg(key))
_, cmd = session.update(KeyMsg("enter"))
run(cmd)
print(session.output)
```

## What this package does not do

It has no SSH server and no command to start one: nothing here listens on
a port, accepts logins or connects a network session to `ShellSession`.
The reverse SSH tunnel is only configured (`PotState.set_tunnel`,
`TunnelConfig`); nothing opens it. There is no command-line program; the
pieces above are used from Python.

## Tests

    pip install .[test]
    pytest