# flappy/game/pipes.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .config import WorldConfig

logger = logging.getLogger(__name__)


@dataclass
class Pipe:
    """A top/bottom pipe pair; `top` is the y of the gap's upper edge."""
    x: float
    top: int
    passed: bool = False


class PipeGen:
    """
    Spawns pipes on a timer at the right edge, scrolls them left,
    scores them as they pass the bird and evicts them off-screen.
    """
    def __init__(self, config: WorldConfig, seed: int | None = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.config = config
        self.seed = seed
        self.rng = random.Random(seed)
        self.pipes: List[Pipe] = []
        self.timer_ms = 0.0

    def reset(self):
        """Clear pipes and the spawn timer. The RNG keeps its stream."""
        self.pipes = []
        self.timer_ms = 0.0

    def random_top(self) -> int:
        """Uniform integer in [min_top, max_top] inclusive."""
        return self.rng.randint(int(self.config.min_top), self.config.max_top)

    def try_spawn(self, dt_ms: float) -> Optional[Pipe]:
        """Accumulate dt; once the interval is reached spawn one pipe and restart the timer."""
        self.timer_ms += dt_ms
        if self.timer_ms < self.config.spawn_interval_ms:
            return None
        self.timer_ms = 0.0
        pipe = Pipe(x=self.config.spawn_x, top=self.random_top())
        self.pipes.append(pipe)
        logger.debug("spawned pipe top=%d (active=%d)", pipe.top, len(self.pipes))
        return pipe

    def advance(self, bird_x: float) -> int:
        """
        Scroll every pipe by the fixed speed, flag pipes that just passed the bird
        and drop the ones past the eviction line. Returns the number of new passes.
        """
        scored = 0
        for pipe in self.pipes:
            pipe.x -= self.config.pipe_speed
            if not pipe.passed and pipe.x + self.config.score_offset < bird_x:
                pipe.passed = True
                scored += 1

        # Remove off-screen pipes
        kept = [p for p in self.pipes if not p.x < self.config.evict_x]
        if len(kept) != len(self.pipes):
            logger.debug("evicted %d pipe(s)", len(self.pipes) - len(kept))
        self.pipes = kept
        return scored
