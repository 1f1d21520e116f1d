# flappy/game/game.py
#command is python -m flappy.game.game
import sys, argparse, logging
from pathlib import Path
from typing import Optional

import pygame
from pygame import K_SPACE, K_ESCAPE, K_RETURN, K_r

from .assets import SoundHooks, config_from_assets, load_assets
from .config import FPS, SEED_DEFAULT
from .driver import FrameDriver
from .exceptions import ConfigError
from .renderer import Renderer, restart_button_rect
from .simulation import GameState, Simulation

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Pipe seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--fps", type=int, default=FPS, help="Display frame cap (physics is frame-locked).")
    p.add_argument("--assets", type=Path, default=Path("assets"), help="Images folder.")
    p.add_argument("--sounds", type=Path, default=Path("sounds"), help="Sounds folder.")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def resolve_seed(arg_seed):
    # None -> SEED_DEFAULT; -1 -> random
    if arg_seed is None:
        return SEED_DEFAULT
    if arg_seed == -1:
        return None
    return arg_seed


class Controls:
    """
    Maps pygame events onto the simulation and the audio hooks.
    Clicks and taps share one path: restart button when the run is over, flap otherwise.
    """
    def __init__(self, sim: Simulation, hooks: SoundHooks, size, driver: Optional[FrameDriver] = None):
        self.sim = sim
        self.hooks = hooks
        self.driver = driver
        self.size = (int(size[0]), int(size[1]))
        self.restart_rect = restart_button_rect(*self.size)
        self.focused = True
        self.quit = False

    def tap(self, pos) -> bool:
        if self.sim.state is GameState.TERMINATED:
            if self.restart_rect.collidepoint(pos):
                return self.sim.restart()
            return False
        return self.sim.flap()

    def handle(self, event) -> None:
        sim = self.sim
        if event.type == pygame.QUIT:
            self.quit = True
        elif event.type == pygame.KEYDOWN:
            if event.key == K_ESCAPE:
                self.quit = True
            elif event.key == K_SPACE:
                sim.flap()
            elif event.key == K_RETURN:
                if sim.state is GameState.IDLE:
                    sim.start()
                else:
                    sim.restart()
            elif event.key == K_r:
                sim.restart()
        # touch also emits synthetic mouse events; FINGERDOWN handles those
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1 and not getattr(event, "touch", False):
                self.tap(event.pos)
        elif event.type == pygame.FINGERDOWN:
            # finger coordinates are normalised to [0, 1]
            self.tap((int(event.x * self.size[0]), int(event.y * self.size[1])))
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.focused = False
            self.hooks.on_focus_lost()
        elif event.type == pygame.WINDOWFOCUSGAINED:
            self.focused = True
            if self.driver is not None:
                self.driver.reset_clock()
            self.hooks.on_focus_gained()


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()

    # Everything is loaded before the simulation is built.
    assets = load_assets(args.assets, args.sounds)
    try:
        config = config_from_assets(assets)
    except ConfigError as e:
        logger.error("invalid world config: %s", e)
        pygame.quit()
        sys.exit(2)

    pygame.display.set_caption("Flappy")
    screen = pygame.display.set_mode((int(config.width), int(config.height)))
    clock = pygame.time.Clock()

    hooks = SoundHooks(assets)
    sim = Simulation(config, seed=resolve_seed(args.seed), hooks=hooks)
    renderer = Renderer(assets)

    def render(view):
        renderer.draw(screen, view)
        pygame.display.flip()

    driver = FrameDriver(sim, render)
    controls = Controls(sim, hooks, screen.get_size(), driver)

    while True:
        clock.tick(args.fps)

        for event in pygame.event.get():
            controls.handle(event)
            if controls.quit:
                pygame.quit(); sys.exit()

        # frozen while unfocused; the clock restarts on focus gain
        if controls.focused:
            driver.frame(pygame.time.get_ticks())


if __name__ == "__main__":
    run()
