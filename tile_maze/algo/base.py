import numbers
import os
import random
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from tile_maze.core.errors import InvalidDimensions, RandomnessUnavailable
from tile_maze.core.events import StepEvent
from tile_maze.core.grid import TileGrid

MIN_SIZE = 3


def draw_seed() -> int:
    """Draws a fresh 64-bit seed from the OS entropy pool."""
    try:
        return int.from_bytes(os.urandom(8), "big")
    except (NotImplementedError, OSError) as e:
        raise RandomnessUnavailable("OS randomness source is unavailable") from e


class Generator(ABC):
    def __init__(self, strict: bool = False):
        # strict: reject sizes below MIN_SIZE instead of clamping them
        self.strict = strict

    def normalize_dimensions(self, width: int, height: int) -> Tuple[int, int]:
        """
        Rejects non-positive sizes, rounds even sizes up to the next odd one
        and clamps 1 to MIN_SIZE (or rejects it in strict mode).
        """
        for value in (width, height):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                raise InvalidDimensions(width, height)
        width, height = int(width), int(height)

        w = width + 1 if width % 2 == 0 else width
        h = height + 1 if height % 2 == 0 else height

        if w < MIN_SIZE or h < MIN_SIZE:
            if self.strict:
                raise InvalidDimensions(width, height, f"smallest maze is {MIN_SIZE}x{MIN_SIZE}")
            w, h = max(w, MIN_SIZE), max(h, MIN_SIZE)
        return w, h

    @staticmethod
    def make_rng(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> Tuple[random.Random, Optional[int]]:
        """
        Returns the RNG owned by one generation and the seed it was built from
        (None when the caller supplied its own RNG).
        """
        if rng is not None:
            return rng, None
        if seed is None:
            seed = draw_seed()
        return random.Random(seed), seed

    @abstractmethod
    def carve(self, grid: TileGrid, rng: random.Random) -> Iterator[StepEvent]:
        """
        Carves the maze into grid in place, yielding one event per step.
        """
        pass
