# flappy/game/geometry.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """Float axis-aligned rectangle, top-left origin (pygame.Rect truncates to ints)."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """For pygame.draw / pygame.Rect."""
        return int(self.x), int(self.y), int(self.w), int(self.h)


def overlaps(a: Rect, b: Rect) -> bool:
    """AABB test: not disjoint on x and not disjoint on y. Touching edges count."""
    return not (a.right < b.x or a.x > b.right or a.bottom < b.y or a.y > b.bottom)
