# flappy/env/observations.py
from __future__ import annotations
from typing import Optional

import numpy as np

from ..game.simulation import PipeView, WorldView

MAX_VY = 15.0   # |vy| used for normalization (px/tick)
OBS_SIZE = 5

OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def next_pipe(view: WorldView) -> Optional[PipeView]:
    """First pipe (spawn order) whose right edge is not yet behind the bird's left edge."""
    cfg = view.config
    bird_left = view.bird.x - view.bird.w / 2
    for p in view.pipes:
        if p.x + cfg.pipe_width >= bird_left:
            return p
    return None


def build_observation(view: WorldView) -> np.ndarray:
    """
    Observation vector, shape (5,), float32:
    [y_norm, vy_norm, next_dx_norm, gap_top_norm, gap_bottom_norm]
    - y is the bird centre over the playfield (0 = ceiling, 1 = ground line)
    - next_dx is the horizontal distance to the next pipe over the world width (1 = none)
    - gap values are in playfield units; with no pipe ahead the gap spans the
      centre of the valid spawn range
    """
    cfg = view.config
    field_h = max(1.0, float(cfg.ground_y))

    y_norm = _clamp01(view.bird.y / field_h)
    vy_norm = max(-1.0, min(1.0, view.bird.vy / MAX_VY))

    pipe = next_pipe(view)
    if pipe is None:
        dx_norm = 1.0
        gap_top = (cfg.min_top + cfg.max_top) / 2
    else:
        dx_norm = _clamp01((pipe.x - view.bird.x) / max(1.0, float(cfg.width)))
        gap_top = pipe.top
    gap_bottom = gap_top + cfg.pipe_gap

    obs = np.array(
        [y_norm, vy_norm, dx_norm, _clamp01(gap_top / field_h), _clamp01(gap_bottom / field_h)],
        dtype=np.float32,
    )
    return obs
