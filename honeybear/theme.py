"""Colours and sizes for the touch-screen display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

RGBA = tuple[int, int, int, int]

BACKGROUND = (0xD5, 0xA0, 0x5C, 0xFF)
BUTTON = (0x00, 0x00, 0x00, 0x00)

_COLORS = {
    "background": BACKGROUND,
    "button": BUTTON,
}


@dataclass(frozen=True)
class TouchTheme:
    """A honey-coloured theme with everything drawn twice as large."""

    scale: float = 2

    def color(self, name: str) -> Optional[RGBA]:
        """The override for a named colour, or None to use the toolkit default."""
        return _COLORS.get(name)

    def size(self, base: float) -> float:
        return base * self.scale