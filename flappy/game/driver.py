# flappy/game/driver.py
from __future__ import annotations
from typing import Callable, Optional

from .simulation import Simulation, WorldView


class FrameDriver:
    """
    One callback, one tick: elapsed time since the previous frame goes to
    Simulation.update, then the render callback gets a read-only view.
    No frame skipping, no catch-up batching.
    """
    def __init__(self, sim: Simulation, render: Optional[Callable[[WorldView], None]] = None):
        self.sim = sim
        self.render = render
        self._last_ms: Optional[float] = None
        self.frames = 0

    def reset_clock(self) -> None:
        """Next frame reports zero elapsed time."""
        self._last_ms = None

    def frame(self, now_ms: float) -> float:
        """Run one tick at timestamp `now_ms`; returns the dt that was used."""
        dt = 0.0 if self._last_ms is None else now_ms - self._last_ms
        self._last_ms = now_ms
        self.sim.update(dt)
        if self.render is not None:
            self.render(self.sim.view())
        self.frames += 1
        return dt
