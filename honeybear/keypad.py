"""State of the on-screen PIN keypad."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

MAX_DIGITS = 9


@dataclass
class KeypadState:
    on_success: Callable[[str], None]
    on_cancel: Callable[[], None]
    hide_typed: bool = False
    label: str = ""
    typed: str = ""

    def add_digit(self, digit: str) -> None:
        """Append a digit unless the display is full."""
        if len(self.label) >= MAX_DIGITS:
            return
        self.label += "*" if self.hide_typed else digit
        self.typed += digit

    def clear(self) -> None:
        self.typed = ""
        self.label = ""

    def submit(self) -> None:
        """Hand the typed digits to the success callback and reset."""
        self.on_success(self.typed)
        self.clear()

    def cancel(self) -> None:
        self.on_cancel()