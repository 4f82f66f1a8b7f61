"""The touch-screen display: an animated bear with live honey pot statistics."""

from __future__ import annotations

import io
import logging
import queue
import random
import threading
from pathlib import Path
from typing import Any, Optional

from honeybear.admin import open_admin_menu
from honeybear.bears import Bear, Bears
from honeybear.db import Database
from honeybear.events import EventBus
from honeybear.notifications import NotificationQueue
from honeybear.state import PotState, TunnelStatus
from honeybear.theme import TouchTheme

VERSION = "v1.0.1"
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 480
IDLE_WAIT = 2.0
GLITCH_WAIT = 0.6
IDLE_TIMEOUT = 60.0
SUBSCRIPTION = "notifications"
ASSETS_DIR = Path(__file__).with_name("assets")

log = logging.getLogger(__name__)

BEARS = Bears(
    [
        Bear("Sleeping", "bear_sleeping.jpg", "boot", ""),
        Bear("Angry", "bear_angry.jpg", "emote", "angry"),
        Bear("Cool", "bear_cool.jpg", "emote", "happy"),
        Bear("Happy", "bear_happy.jpg", "standard", "idle"),
        Bear("Laughing", "bear_laughing.jpg", "emote", "happy"),
        Bear("Look Left", "bear_look_left.jpg", "standard", "idle"),
        Bear("Look Right", "bear_look_right.jpg", "standard", "idle"),
        Bear("Sad", "bear_sad.jpg", "emote", "sad"),
        Bear("Surprised", "bear_surprised.jpg", "standard", "react"),
        Bear("Terminator", "bear_terminator.jpg", "special", ""),
        Bear("001", "bear_glitch_001.jpg", "glitch", ""),
        Bear("002", "bear_glitch_002.jpg", "glitch", ""),
        Bear("003", "bear_glitch_003.jpg", "glitch", ""),
        Bear("004", "bear_glitch_004.jpg", "glitch", ""),
    ]
)


class EmotionState:
    """How likely the bear is to show an emotion; rises with activity."""

    def __init__(self, factor: int = 1, rng: Optional[random.Random] = None) -> None:
        self.factor = factor
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()

    def should_show_emotion(self, active_users: int, max_users: int) -> bool:
        """Roll against the current factor; a hit calms the bear down.

        Raises ValueError when there is nothing to roll against.
        """
        roll = self._rng.randrange(active_users * 3 + max_users * 2)
        with self._lock:
            show = roll <= self.factor
            if show:
                self.factor -= 10
                if self.factor < 0:
                    self.factor = 1
        log.debug("Bear update: roll=%s factor=%s", roll, self.factor)
        return show

    def on_event(self) -> None:
        with self._lock:
            self.factor += 1

    def on_idle(self) -> None:
        with self._lock:
            self.factor -= 1


class BearSelector:
    """Chooses the bear to show next, with a glitch frame between categories."""

    def __init__(self, bears: Any, current: Any = None) -> None:
        self.bears = bears
        if current is None:
            current = bears.get_bear_by_category("boot", "")
        if current is None:
            raise LookupError("Error loading boot bear")
        self.current = current
        self.override = ""

    def next_bear(self, show_emotion: bool) -> tuple[Any, float]:
        """Return the bear to draw and how many seconds to show it."""
        category, sub_category = ("emote", "") if show_emotion else ("standard", "idle")
        if self.override:
            new = self.bears.get_bear(self.override)
        else:
            new = self.bears.get_bear_by_category(category, sub_category)

        if new is None:
            log.debug("No bear found. Using current bear.")
            return self.current, IDLE_WAIT

        if not self.override and self.current.category != new.category:
            self.override = new.name
            glitch = self.bears.get_bear_by_category("glitch", "")
            return (glitch if glitch is not None else self.current), GLITCH_WAIT

        self.current = new
        self.override = ""
        return new, IDLE_WAIT


def _hex(rgba: Optional[tuple]) -> str:
    if rgba is None:
        return "#000000"
    red, green, blue = rgba[:3]
    return f"#{red:02x}{green:02x}{blue:02x}"


def _load_image(data: bytes, size: tuple[int, int]):
    from PIL import Image, ImageTk

    with Image.open(io.BytesIO(data)) as image:
        return ImageTk.PhotoImage(image.convert("RGB").resize(size))


def _about(root: Any) -> None:
    import tkinter as tk

    dialog = tk.Toplevel(root)
    dialog.transient(root)
    dialog.grab_set()
    header = tk.Frame(dialog)
    header.pack(fill="x")
    tk.Label(header, text=f"Honey Bear Honey Pot: {VERSION}").pack(side="left", padx=8, pady=8)
    tk.Button(header, text="✕", command=dialog.destroy).pack(side="right", padx=8, pady=8)
    body = tk.Frame(dialog)
    body.pack(fill="both", expand=True)
    try:
        logo = _load_image((ASSETS_DIR / "qr.png").read_bytes(), (300, 300))
    except OSError as exc:
        log.error("Error loading logo: %s", exc)
    else:
        label = tk.Label(body, image=logo)
        label.image = logo
        label.pack(side="left", padx=8, pady=8)
    tk.Label(
        body,
        text="Questions?\nCheck out the website\nfor answers, build process,\nand how to connect!",
        justify="left",
    ).pack(side="left", padx=8, pady=8)


def start_gui(
    state: PotState,
    db: Database,
    bus: Optional[EventBus],
    fullscreen: bool = False,
    width: float = 0,
    height: float = 0,
) -> None:
    """Show the display window and run it until it is closed."""
    import tkinter as tk

    width = int(width) or DEFAULT_WIDTH
    height = int(height) or DEFAULT_HEIGHT
    theme = TouchTheme()
    background = _hex(theme.color("background"))

    selector = BearSelector(BEARS)
    emotion = EmotionState()
    notifications = NotificationQueue()
    lock = threading.Lock()
    stop = threading.Event()

    root = tk.Tk()
    root.title("Honey Bear Honey Pot")
    root.geometry(f"{width}x{height}")
    root.configure(bg=background)
    root.attributes("-fullscreen", bool(fullscreen))

    canvas = tk.Canvas(root, highlightthickness=0, bg=background)
    canvas.pack(fill="both", expand=True)
    images: dict[str, Any] = {}
    shown = {"bear": selector.current}

    def canvas_size() -> tuple[int, int]:
        current_width, current_height = canvas.winfo_width(), canvas.winfo_height()
        if current_width <= 1 or current_height <= 1:
            return width, height
        return current_width, current_height

    def draw_bear(bear: Any) -> None:
        shown["bear"] = bear
        try:
            images["bear"] = _load_image(bear.file_data(ASSETS_DIR), canvas_size())
        except (OSError, ValueError) as exc:
            log.debug("Could not load bear %s: %s", bear.name, exc)
            return
        canvas.delete("bear")
        canvas.create_image(0, 0, anchor="nw", image=images["bear"], tags="bear")
        canvas.tag_lower("bear")

    def live_image() -> Any:
        if "live" not in images:
            try:
                images["live"] = _load_image((ASSETS_DIR / "live.png").read_bytes(), (20, 25))
            except OSError as exc:
                log.error("Error loading live indicator: %s", exc)
                images["live"] = None
        return images["live"]

    def draw_overlay() -> None:
        canvas.delete("overlay")
        right = canvas_size()[0] - 10
        y = 10
        if state.tunnel_status == TunnelStatus.CONNECTED:
            image = live_image()
            if image is not None:
                canvas.create_image(right, y, anchor="ne", image=image, tags="overlay")
            else:
                canvas.create_text(right, y, anchor="ne", text="LIVE", fill="red", tags="overlay")
            y += 30
        lines = (
            ("NOW", ("TkDefaultFont", 12, "bold")),
            (f"{len(state.active_users()):04d}", ("Courier", 24)),
            ("ALL TIME", ("TkDefaultFont", 12, "bold")),
            (f"{state.users_all_time():04d}", ("Courier", 24)),
        )
        for text, font in lines:
            canvas.create_text(right, y, anchor="ne", text=text, font=font, tags="overlay")
            y += 30 if font[0] == "Courier" else 20

        with lock:
            entries = notifications.entries()
        for index, entry in enumerate(entries):
            top = 10 + index * 50
            canvas.create_rectangle(10, top, 250, top + 45, fill="white", stipple="gray50", outline="", tags="overlay")
            canvas.create_text(15, top + 3, anchor="nw", text=entry.sender, font=("TkDefaultFont", 13, "bold"), tags="overlay")
            canvas.create_text(15, top + 23, anchor="nw", text=entry.action, font=("TkDefaultFont", 13, "bold"), tags="overlay")

    def on_click(event: Any) -> None:
        current_width, current_height = canvas_size()
        if current_width / 3 <= event.x <= 2 * current_width / 3 and current_height / 3 <= event.y <= 2 * current_height / 3:
            react = selector.bears.get_bear_by_category("standard", "react")
            if react is not None:
                selector.override = react.name

    canvas.bind("<Button-1>", on_click)
    canvas.bind("<Configure>", lambda _event: draw_bear(shown["bear"]))

    toolbar = tk.Frame(root, bg=background)
    tk.Button(toolbar, text="?", command=lambda: _about(root), relief="flat", bg=background).pack(fill="x")
    tk.Button(toolbar, text="☰", command=lambda: open_admin_menu(root, db), relief="flat", bg=background).pack(fill="x")
    toolbar.place(relx=1.0, rely=1.0, anchor="se", x=-10, y=-10)

    subscription = bus.subscribe(SUBSCRIPTION) if bus is not None else None

    def consume() -> None:
        while not stop.is_set():
            try:
                event = subscription.get(timeout=IDLE_TIMEOUT)
            except queue.Empty:
                emotion.on_idle()
                continue
            if event is None:
                return
            with lock:
                notifications.push(event)
            emotion.on_event()

    if subscription is not None:
        threading.Thread(target=consume, daemon=True).start()

    def refresh() -> None:
        try:
            show = emotion.should_show_emotion(len(state.active_users()), state.max_users())
        except ValueError:
            show = False
        bear, wait = selector.next_bear(show)
        draw_overlay()
        draw_bear(bear)
        root.after(int(wait * 1000), refresh)

    draw_bear(selector.current)
    root.after(0, refresh)
    try:
        root.mainloop()
    finally:
        stop.set()
        if bus is not None:
            bus.unsubscribe(SUBSCRIPTION)
        try:
            root.destroy()
        except tk.TclError:
            pass