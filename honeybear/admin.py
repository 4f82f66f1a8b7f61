"""Admin PIN check and the admin menu of the touch display."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from honeybear import reports
from honeybear.db import Database
from honeybear.options import KEY_POT_MAX_USERS, option_get, option_set

if TYPE_CHECKING:
    import tkinter

ADMIN_PIN_KEY = "gui_pin"
DEFAULT_PIN = "1234"
MAX_AUTH_SECONDS = 30
MAX_DIGITS = 9
LIST_FONT = ("Courier", 12)

log = logging.getLogger(__name__)


@dataclass
class AdminAuth:
    """The PIN that unlocks the admin menu and how long the prompt stays open."""

    pin: str = DEFAULT_PIN
    max_seconds: int = MAX_AUTH_SECONDS

    @classmethod
    def from_db(cls, db: Database) -> AdminAuth:
        """Use the stored PIN, or the default one when none is set."""
        return cls(option_get(db, ADMIN_PIN_KEY) or DEFAULT_PIN)

    def check(self, pin: str) -> bool:
        return pin == self.pin

    def expired(self, elapsed: float) -> bool:
        """True once the prompt has been open for ``max_seconds``."""
        return elapsed >= self.max_seconds


def _modal(root: tkinter.Misc) -> tkinter.Toplevel:
    import tkinter as tk

    dialog = tk.Toplevel(root)
    dialog.transient(root)
    dialog.grab_set()
    return dialog


def _close(window: tkinter.Toplevel) -> None:
    if window.winfo_exists():
        window.destroy()


def _keypad(
    parent: tkinter.Misc,
    on_submit: Callable[[str], None],
    on_cancel: Callable[[], None],
    hide_typed: bool,
) -> tkinter.Frame:
    """A numeric keypad of up to nine digits, optionally masking what is typed."""
    import tkinter as tk

    frame = tk.Frame(parent)
    typed: list[str] = []
    display = tk.StringVar(master=frame, value="")
    tk.Label(frame, textvariable=display, font=("Courier", 36), width=MAX_DIGITS).grid(
        row=0, column=0, columnspan=3
    )

    def add_digit(digit: str) -> None:
        if len(typed) >= MAX_DIGITS:
            return
        typed.append(digit)
        display.set(display.get() + ("*" if hide_typed else digit))

    def submit() -> None:
        value = "".join(typed)
        typed.clear()
        display.set("")
        on_submit(value)

    for row, digits in enumerate(("123", "456", "789"), start=1):
        for column, digit in enumerate(digits):
            tk.Button(frame, text=digit, width=4, command=lambda d=digit: add_digit(d)).grid(
                row=row, column=column, sticky="nsew"
            )
    tk.Button(frame, text="0", width=4, command=lambda: add_digit("0")).grid(row=4, column=1, sticky="nsew")
    tk.Button(frame, text="✕", command=on_cancel).grid(row=5, column=0, sticky="nsew")
    tk.Button(frame, text="Submit", command=submit).grid(row=5, column=1, columnspan=2, sticky="nsew")
    return frame


def _option_prompt(root: tkinter.Misc, db: Database, key: str) -> None:
    dialog = _modal(root)

    def save(value: str) -> None:
        log.debug("%s val=%s", key, value)
        try:
            option_set(db, key, value)
        except sqlite3.Error as exc:
            log.error("Setting %s failed: %s", key, exc)
        _close(dialog)

    _keypad(dialog, save, lambda: _close(dialog), hide_typed=False).pack(padx=10, pady=10)


def _list_modal(root: tkinter.Misc, title: str, rows: list[str]) -> tkinter.Toplevel:
    import tkinter as tk

    dialog = _modal(root)
    dialog.geometry("700x400")
    header = tk.Frame(dialog)
    header.pack(fill="x")
    tk.Label(header, text=title).pack(side="left", padx=8, pady=8)
    tk.Button(header, text="✕", command=lambda: _close(dialog)).pack(side="right", padx=8, pady=8)
    listbox = tk.Listbox(dialog, font=LIST_FONT)
    for row in rows:
        listbox.insert("end", row)
    listbox.pack(fill="both", expand=True)
    return dialog


def _report_button(parent: tkinter.Misc, root: tkinter.Misc, label: str, title: str, fetch: Callable[[], list[str]]):
    import tkinter as tk

    def show() -> None:
        try:
            rows = fetch()
        except sqlite3.Error as exc:
            log.error("Error querying %s: %s", title.lower(), exc)
            return
        _list_modal(root, title, rows)

    return tk.Button(parent, text=label, command=show)


def _stats_tab(notebook: Any, root: tkinter.Misc, db: Database) -> tkinter.Frame:
    import tkinter as tk

    tab = tk.Frame(notebook)
    counts = tk.Frame(tab)
    counts.grid(row=0, column=0, columnspan=2, sticky="ew")
    tk.Label(counts, text="Users:", font=("TkDefaultFont", 12, "bold")).pack(side="left", padx=8)
    try:
        rows = reports.user_counts(db)
    except sqlite3.Error as exc:
        log.error("Error querying user counts: %s", exc)
        rows = []
    for row in rows:
        tk.Label(counts, text=f"{row.count} ({row.value})", font=LIST_FONT).pack(side="left", padx=8)

    buttons = (
        ("Rare Commands", "Rare Commands", lambda: reports.rare_commands(db)),
        ("Recent", "Recent Events", lambda: reports.recent_events(db, None)),
        ("Top Commands", "Top Commands", lambda: reports.top_commands(db)),
        ("Top Users", "Top Users", lambda: reports.top_users(db)),
    )
    for index, (label, title, fetch) in enumerate(buttons):
        _report_button(tab, root, label, title, fetch).grid(
            row=1 + index // 2, column=index % 2, sticky="nsew", padx=4, pady=4
        )
    return tab


def _pot_tab(notebook: Any, root: tkinter.Misc, db: Database) -> tkinter.Frame:
    import tkinter as tk

    tab = tk.Frame(notebook)
    tk.Button(tab, text="Set Max Users", command=lambda: _option_prompt(root, db, KEY_POT_MAX_USERS)).grid(
        row=0, column=0, sticky="nsew", padx=4, pady=4
    )
    return tab


def _system_tab(notebook: Any, root: tkinter.Tk, db: Database) -> tkinter.Frame:
    import tkinter as tk

    tab = tk.Frame(notebook)

    def toggle_fullscreen() -> None:
        root.attributes("-fullscreen", not bool(root.attributes("-fullscreen")))

    tk.Button(tab, text="Quit App", command=root.quit).grid(row=0, column=0, sticky="nsew", padx=4, pady=4)
    tk.Button(tab, text="Change PIN", command=lambda: _option_prompt(root, db, ADMIN_PIN_KEY)).grid(
        row=0, column=1, sticky="nsew", padx=4, pady=4
    )
    tk.Button(tab, text="Toggle Fullscreen", command=toggle_fullscreen).grid(
        row=1, column=0, columnspan=2, sticky="nsew", padx=4, pady=4
    )
    return tab


def _show_menu(root: tkinter.Tk, db: Database) -> tkinter.Toplevel:
    import tkinter as tk
    from tkinter import ttk

    menu = _modal(root)
    menu.geometry("900x400")
    header = tk.Frame(menu)
    header.pack(fill="x")
    tk.Label(header, text="Admin Menu").pack(side="left", padx=8, pady=8)
    tk.Button(header, text="✕", command=lambda: _close(menu)).pack(side="right", padx=8, pady=8)

    notebook = ttk.Notebook(menu)
    notebook.add(_stats_tab(notebook, root, db), text="Stats")
    notebook.add(_pot_tab(notebook, root, db), text="SSH")
    notebook.add(_system_tab(notebook, root, db), text="App")
    notebook.pack(fill="both", expand=True)
    return menu


def open_admin_menu(root: tkinter.Tk, db: Database) -> tkinter.Toplevel:
    """Ask for the admin PIN and open the admin menu once it is entered.

    The prompt closes by itself after ``MAX_AUTH_SECONDS``.
    """
    auth = AdminAuth.from_db(db)
    prompt = _modal(root)
    elapsed = 0

    def submit(value: str) -> None:
        if auth.check(value):
            _close(prompt)
            _show_menu(root, db)

    def tick() -> None:
        nonlocal elapsed
        if not prompt.winfo_exists():
            return
        elapsed += 1
        if auth.expired(elapsed):
            _close(prompt)
            return
        prompt.after(1000, tick)

    _keypad(prompt, submit, lambda: _close(prompt), hide_typed=True).pack(padx=10, pady=10)
    prompt.after(1000, tick)
    return prompt