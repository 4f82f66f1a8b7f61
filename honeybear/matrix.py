"""Falling-glyph "digital rain" animation."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from honeybear.messages import Command, WindowSizeMsg

BACKGROUND = "#111111"

PALETTES = (
    "#000048",
    "#5e5e5e",
    "#5a5a5a",
    "#009a22",
    "#36ba01",
    "#002706",
    "#00ff00",
    "#009a22",
    "#00ff2b",
    "#36ba01",
)

GLYPHS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ12345678909qwertyuiopasdfghjklzxcvbnm"


@dataclass(frozen=True)
class MatrixTick:
    pass


@dataclass(frozen=True)
class MatrixStop:
    pass


def start() -> MatrixTick:
    return MatrixTick()


def _rgb(color: str) -> str:
    return ";".join(str(int(color[i : i + 2], 16)) for i in (1, 3, 5))


def _paint(symbol: str, color: str, bold: bool) -> str:
    codes = (["1"] if bold else []) + [f"38;2;{_rgb(color)}", f"48;2;{_rgb(BACKGROUND)}"]
    return f"\x1b[{';'.join(codes)}m{symbol}\x1b[0m"


@dataclass
class Matrix:
    width: int = 0
    height: int = 0
    speed: float = 0.1
    rng: Any = field(default_factory=random.Random, repr=False)
    symbols: list = field(default_factory=list)
    colors: list = field(default_factory=list)

    def init(self) -> Command:
        return self._tick()

    def update(self, msg: Any) -> tuple[Matrix, Optional[Command]]:
        match msg:
            case WindowSizeMsg(width=width, height=height):
                self.width = width
                self.height = height
                self._reset()
            case MatrixTick():
                self._drop()
                return self, self._tick()
        return self, None

    def view(self) -> str:
        columns = self.width // 2
        lines = []
        for row in range(self.height):
            cells = []
            for column in range(columns):
                color_index = self.colors[column][row]
                cells.append(_paint(self.symbols[column][row], PALETTES[color_index], color_index != 0) + " ")
            lines.append("".join(cells) + "\n")
        return "".join(lines)

    def _tick(self) -> Command:
        delay = self.speed

        def tick() -> MatrixTick:
            time.sleep(delay)
            return MatrixTick()

        return tick

    def _reset(self) -> None:
        columns = self.width // 2
        self.symbols = [
            [GLYPHS[self.rng.randrange(len(GLYPHS))] for _ in range(self.height)] for _ in range(columns)
        ]
        self.colors = [[0] * self.height for _ in range(columns)]

    def _drop(self) -> None:
        for column in self.colors:
            if not column:
                continue
            column[1:] = column[:-1]
            column[0] = max(column[0] - 1, 0)
            if column[0] == 0 and self.rng.randrange(100) <= 1:
                column[0] = len(PALETTES) - 1


def initial_model(width: int, height: int) -> Matrix:
    matrix = Matrix(width=width, height=height)
    matrix._reset()
    return matrix