# flappy/game/config.py
from __future__ import annotations
import math
from dataclasses import dataclass, fields
from typing import Optional

from .exceptions import ConfigError

# --- Display ---
WIDTH = 480
HEIGHT = 640
FPS = 60

# --- World / Physics ---
GRAVITY = 0.45              # px/tick^2, one step per rendered frame
FLAP_VELOCITY = -8.5        # px/tick, overrides vy on flap
GROUND_HEIGHT = 60          # fallback when the ground image is missing

# --- Bird ---
BIRD_X = 90                 # bird's fixed x (world scrolls left)
BIRD_W = 48
BIRD_H = 48
BIRD_START_Y = HEIGHT / 2 - 30

# --- Pipes ---
PIPE_WIDTH = 52             # fallback when the pipe image is missing
PIPE_GAP = 150
PIPE_SPEED = 2.2            # px/tick
PIPE_INTERVAL_MS = 1400.0
PIPE_MIN_TOP = 60           # ceiling margin for the gap top
PIPE_BOTTOM_MARGIN = 200    # max_top = HEIGHT - PIPE_BOTTOM_MARGIN - PIPE_GAP
PIPE_SCORE_OFFSET = 30      # scored once x + offset < bird x
PIPE_EVICT_X = -120
SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_SKY = (135, 206, 235)
COLOR_PIPE = (26, 138, 26)
COLOR_GROUND = (123, 90, 42)
COLOR_BIRD = (255, 255, 0)
COLOR_FG = (255, 255, 255)
COLOR_SHADOW = (20, 30, 40)
COLOR_PANEL = (40, 60, 90)
COLOR_PANEL_EDGE = (90, 130, 180)


@dataclass(frozen=True)
class WorldConfig:
    """
    World constants, fixed at construction.
    Defaults mirror the module constants above; validated on creation.
    """
    width: float = WIDTH
    height: float = HEIGHT
    ground_height: float = GROUND_HEIGHT
    gravity: float = GRAVITY
    flap_velocity: float = FLAP_VELOCITY

    bird_x: float = BIRD_X
    bird_w: float = BIRD_W
    bird_h: float = BIRD_H
    bird_start_y: float = BIRD_START_Y

    pipe_width: float = PIPE_WIDTH
    pipe_gap: int = PIPE_GAP
    pipe_speed: float = PIPE_SPEED
    spawn_interval_ms: float = PIPE_INTERVAL_MS
    min_top: int = PIPE_MIN_TOP
    pipe_bottom_margin: int = PIPE_BOTTOM_MARGIN
    spawn_x: Optional[float] = None     # None -> width + 30
    score_offset: float = PIPE_SCORE_OFFSET
    evict_x: float = PIPE_EVICT_X

    def __post_init__(self):
        if self.spawn_x is None:
            object.__setattr__(self, "spawn_x", self.width + 30)
        self.validate()

    @property
    def ground_y(self) -> float:
        return self.height - self.ground_height

    @property
    def max_top(self) -> int:
        return int(self.height - self.pipe_bottom_margin - self.pipe_gap)

    @property
    def half_w(self) -> float:
        return self.bird_w / 2

    @property
    def half_h(self) -> float:
        return self.bird_h / 2

    def validate(self) -> None:
        """Raise ConfigError if these constants cannot produce valid pipes."""
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigError(f"{f.name} must be a finite number, got {value!r}")

        for name in ("width", "height", "ground_height", "bird_w", "bird_h",
                     "pipe_width", "pipe_gap", "min_top", "pipe_bottom_margin"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative, got {getattr(self, name)}")

        # pipe tops are drawn as whole pixels from [min_top, max_top]
        for name in ("min_top", "pipe_gap", "pipe_bottom_margin"):
            if float(getattr(self, name)) != int(getattr(self, name)):
                raise ConfigError(f"{name} must be a whole number, got {getattr(self, name)}")

        for name in ("pipe_speed", "spawn_interval_ms"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

        if self.pipe_bottom_margin < self.ground_height:
            raise ConfigError(
                f"pipe_bottom_margin ({self.pipe_bottom_margin}) must cover "
                f"ground_height ({self.ground_height})"
            )
        if self.min_top + self.pipe_gap + self.pipe_bottom_margin > self.height:
            raise ConfigError(
                f"no valid gap range: min_top {self.min_top} + gap {self.pipe_gap} "
                f"+ bottom margin {self.pipe_bottom_margin} > height {self.height}"
            )
        if self.evict_x > -self.pipe_width:
            raise ConfigError(
                f"evict_x ({self.evict_x}) must be at least one pipe width "
                f"({self.pipe_width}) left of the screen"
            )
