# flappy/game/collision.py
from __future__ import annotations
from typing import Iterable, Optional

from .bird import Bird
from .config import WorldConfig
from .geometry import Rect, overlaps
from .pipes import Pipe


def pipe_rects(pipe: Pipe, config: WorldConfig) -> tuple[Rect, Rect]:
    """(top, bottom) rects: world top to gap top, gap bottom to ground line."""
    bottom_y = pipe.top + config.pipe_gap
    top = Rect(pipe.x, 0.0, config.pipe_width, pipe.top)
    bottom = Rect(pipe.x, bottom_y, config.pipe_width, config.ground_y - bottom_y)
    return top, bottom


def collision_cause(bird: Bird, pipes: Iterable[Pipe], config: WorldConfig) -> Optional[str]:
    """'ground' | 'ceiling' | 'pipe', or None when the bird is clear."""
    if bird.bottom >= config.ground_y:
        return "ground"
    if bird.top <= 0:
        return "ceiling"
    me = bird.rect
    for pipe in pipes:
        top, bottom = pipe_rects(pipe, config)
        if overlaps(me, top) or overlaps(me, bottom):
            return "pipe"
    return None


def is_colliding(bird: Bird, pipes: Iterable[Pipe], config: WorldConfig) -> bool:
    return collision_cause(bird, pipes, config) is not None
