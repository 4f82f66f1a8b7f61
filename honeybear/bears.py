"""The catalogue of bear pictures shown by the display."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bear:
    name: str
    file: str
    category: str
    sub_category: str = ""

    def file_data(self, assets_dir: str | Path) -> bytes:
        """Read the bear's image from the assets directory."""
        return (Path(assets_dir) / self.file).read_bytes()


class Bears(Sequence):
    """An ordered collection of bears with lookup helpers."""

    def __init__(self, bears: Iterable[Bear] = (), rng: random.Random | None = None) -> None:
        self._bears = tuple(bears)
        self._rng = rng or random.Random()

    def __getitem__(self, index):
        return self._bears[index]

    def __len__(self) -> int:
        return len(self._bears)

    def get_bear(self, name: str) -> Bear | None:
        return next((bear for bear in self._bears if bear.name == name), None)

    def get_bear_by_category(self, category: str, sub_category: str) -> Bear | None:
        """Pick a random bear of the category (and sub-category, if given)."""
        log.debug("GetBearByCategory category=%r sub_category=%r", category, sub_category)
        if category == "":
            candidates = list(self._bears)
        else:
            candidates = [
                bear
                for bear in self._bears
                if bear.category == category and (sub_category == "" or bear.sub_category == sub_category)
            ]
        if not candidates:
            return None
        return self._rng.choice(candidates)


BEARS = Bears(
    [
        Bear("Sleeping", "bear_sleeping.jpg", "boot"),
        Bear("Angry", "bear_angry.jpg", "emote", "angry"),
        Bear("Cool", "bear_cool.jpg", "emote", "happy"),
        Bear("Happy", "bear_happy.jpg", "standard", "idle"),
        Bear("Laughing", "bear_laughing.jpg", "emote", "happy"),
        Bear("Look Left", "bear_look_left.jpg", "standard", "idle"),
        Bear("Look Right", "bear_look_right.jpg", "standard", "idle"),
        Bear("Sad", "bear_sad.jpg", "emote", "sad"),
        Bear("Surprised", "bear_surprised.jpg", "standard", "react"),
        Bear("Terminator", "bear_terminator.jpg", "special"),
        Bear("001", "bear_glitch_001.jpg", "glitch"),
        Bear("002", "bear_glitch_002.jpg", "glitch"),
        Bear("003", "bear_glitch_003.jpg", "glitch"),
        Bear("004", "bear_glitch_004.jpg", "glitch"),
    ]
)