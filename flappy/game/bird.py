# flappy/game/bird.py
from __future__ import annotations
from dataclasses import dataclass

from .geometry import Rect


@dataclass
class Bird:
    """
    Falling/rising actor centred on (x, y):
    - x never changes after construction
    - vy > 0 means falling (screen y grows downward)
    """
    x: float
    y: float
    vy: float
    w: float
    h: float

    @property
    def half_w(self) -> float:
        return self.w / 2

    @property
    def half_h(self) -> float:
        return self.h / 2

    @property
    def rect(self) -> Rect:
        return Rect(self.x - self.half_w, self.y - self.half_h, self.w, self.h)

    @property
    def top(self) -> float:
        return self.y - self.half_h

    @property
    def bottom(self) -> float:
        return self.y + self.half_h

    def update_physics(self, gravity: float) -> None:
        """One frame-locked Euler step: velocity first, then position. No clamping."""
        self.vy += gravity
        self.y += self.vy

    def flap(self, flap_velocity: float) -> None:
        """Override vy with the flap impulse (no accumulation, no cooldown)."""
        self.vy = flap_velocity
