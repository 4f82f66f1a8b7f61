"""Confetti animation for the shell's celebrate command."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from honeybear.messages import Command, KeyMsg, WindowSizeMsg
from honeybear.simulation import TERMINAL_GRAVITY, Particle, Projectile, System, Vector, fps

FRAMES_PER_SECOND = 30
NUM_PARTICLES = 75

COLORS = ("#a864fd", "#29cdff", "#78ff44", "#ff718d", "#fdff6a")
CHARACTERS = ("█", "▓", "▒", "░", "▄", "▀")


@dataclass(frozen=True)
class FrameMsg:
    time: datetime


@dataclass(frozen=True)
class BurstMsg:
    time: datetime


def burst() -> BurstMsg:
    return BurstMsg(datetime.now())


def _animate() -> Command:
    def frame() -> FrameMsg:
        time.sleep(1 / FRAMES_PER_SECOND)
        return FrameMsg(datetime.now())

    return frame


def _colored(char: str, color: str) -> str:
    red, green, blue = (int(color[i : i + 2], 16) for i in (1, 3, 5))
    return f"\x1b[38;2;{red};{green};{blue}m{char}\x1b[0m"


def spawn(width: int, height: int) -> list[Particle]:
    """Create a burst of particles from the top middle of the frame."""
    particles = []
    for _ in range(NUM_PARTICLES):
        x = float(width // 2)
        physics = Projectile(
            fps(FRAMES_PER_SECOND),
            Vector(x + (width // 4) * (random.random() - 0.5), 0.0, 0.0),
            Vector((random.random() - 0.5) * 100, random.random() * 50, 0.0),
            TERMINAL_GRAVITY,
        )
        particles.append(Particle(char=_colored(random.choice(CHARACTERS), random.choice(COLORS)), physics=physics))
    return particles


@dataclass
class ConfettiModel:
    system: System = field(default_factory=System)

    def init(self) -> Command:
        return _animate()

    def update(self, msg: Any) -> tuple[ConfettiModel, Optional[Command]]:
        """Handle one message; frames advance the physics, keys and bursts add confetti."""
        frame = self.system.frame
        if isinstance(msg, KeyMsg):
            self.system.particles.extend(spawn(frame.width, frame.height))
            return self, None
        if isinstance(msg, FrameMsg):
            self.system.update()
            return self, _animate()
        if isinstance(msg, BurstMsg):
            self.system.particles.extend(spawn(frame.width, frame.height))
            return self, _animate()
        if isinstance(msg, WindowSizeMsg):
            if frame.width == 0 and frame.height == 0:
                self.system.particles = spawn(msg.width, msg.height)
            frame.width = msg.width
            frame.height = msg.height
            return self, None
        return self, None

    def view(self) -> str:
        return self.system.render()