# flappy/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from ..game.config import FPS, WorldConfig
from ..game.renderer import Renderer
from ..game.simulation import GameState, Simulation
from .observations import OBS_LOW, OBS_HIGH, build_observation

PASS_REWARD = 5.0


class FlappyEnv(gym.Env):
    """
    Flappy Gymnasium environment (vector observations).
    - Physics is frame-locked; each internal frame is one tick of 1000/60 ms.
    - Agent acts every `frame_skip` frames (default 2).
    - Observation: shape (5,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 2,
                 time_limit_seconds: Optional[float] = 60.0,
                 config: Optional[WorldConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config if config is not None else WorldConfig()

        # Internal sim timing
        self.sim_fps = FPS
        self.dt_ms = 1000.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = FLAP
        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.sim: Optional[Simulation] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Pipe layout seed is drawn from np_random: reset(seed=s) is reproducible,
        # plain reset() continues the stream.
        sim_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.sim = Simulation(self.config, seed=sim_seed)
        self.sim.start()

        self.timestep = 0
        self.current_seed = self.sim.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "call reset() first"

        if int(action) == 1:
            self.sim.flap()

        score_before = self.sim.score
        for _ in range(self.frame_skip):
            self.sim.update(self.dt_ms)
            if self.sim.state is GameState.TERMINATED:
                break

        alive = self.sim.state is GameState.RUNNING
        passed = self.sim.score - score_before
        reward = (1.0 if alive else -1.0) + PASS_REWARD * passed

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.sim.score,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "death_cause": self.sim.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.sim is not None
        return build_observation(self.sim.view())

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        w, h = int(self.config.width), int(self.config.height)
        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((w, h))
                pygame.display.set_caption("Flappy — Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((w, h))
            self.renderer = Renderer()

        self.renderer.draw(self.screen, self.sim.view())

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", FPS))
            return None

        # (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
