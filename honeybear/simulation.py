"""A small particle system driven by projectile physics."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

NANOSECONDS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Vector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __mul__(self, factor: float) -> Vector:
        return Vector(self.x * factor, self.y * factor, self.z * factor)


TERMINAL_GRAVITY = Vector(0.0, 9.81, 0.0)


def fps(n: int) -> float:
    """Length of one frame in seconds at ``n`` frames per second."""
    return (NANOSECONDS_PER_SECOND // n) / NANOSECONDS_PER_SECOND


class Projectile:
    """A point moving under constant acceleration, stepped one frame at a time."""

    def __init__(self, delta_time: float, position: Vector, velocity: Vector, acceleration: Vector) -> None:
        self._delta_time = delta_time
        self._position = position
        self._velocity = velocity
        self._acceleration = acceleration

    def position(self) -> Vector:
        return self._position

    def velocity(self) -> Vector:
        return self._velocity

    def update(self) -> Vector:
        self._position = self._position + self._velocity * self._delta_time
        self._velocity = self._velocity + self._acceleration * self._delta_time
        return self._position


ExplosionCall = Callable[[str, float, float, int, int], "list[Particle]"]


@dataclass
class Particle:
    char: str
    physics: Projectile
    color: str = ""
    tail_char: str = ""
    hidden: bool = False
    shooting: bool = False
    explosion_call: Optional[ExplosionCall] = None


@dataclass
class Frame:
    width: int = 0
    height: int = 0


@dataclass
class System:
    frame: Frame = field(default_factory=Frame)
    particles: list = field(default_factory=list)

    def update(self) -> None:
        """Advance every particle, exploding spent shooters and dropping those out of frame."""
        width, height = self.frame.width, self.frame.height
        for i in range(len(self.particles) - 1, -1, -1):
            particle = self.particles[i]
            pos = particle.physics.position()

            if not particle.hidden and particle.shooting and particle.physics.velocity().y > -3:
                particle.hidden = True
                if particle.explosion_call is not None:
                    self.particles.extend(particle.explosion_call(particle.color, pos.x, pos.y, width, height))

            if particle.hidden or pos.x > width or pos.x < 0 or pos.y > height:
                # Swap-remove: the last particle takes this slot.
                self.particles[i] = self.particles[-1]
                self.particles.pop()
            else:
                particle.physics.update()

    def visible(self, particle: Particle) -> bool:
        pos = particle.physics.position()
        x, y = int(pos.x), int(pos.y)
        return not particle.hidden and 0 <= y < self.frame.height - 1 and 0 <= x < self.frame.width - 1

    def render(self) -> str:
        height, width = self.frame.height, self.frame.width
        plane = [[""] * width for _ in range(height)]
        for particle in self.particles:
            if not self.visible(particle):
                continue
            pos = particle.physics.position()
            x, y = int(pos.x), int(pos.y)
            plane[y][x] = particle.char
            if particle.shooting:
                tail = -int(particle.physics.velocity().y)
                for offset in range(1, tail):
                    row = y + offset
                    if 0 < row < height - 1:
                        plane[row][x] = particle.tail_char
        return "".join("".join(cell or " " for cell in row) + "\n" for row in plane)