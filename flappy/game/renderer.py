# flappy/game/renderer.py
from __future__ import annotations
import math
from typing import Optional

import pygame

from .assets import Assets
from .collision import pipe_rects
from .config import (
    COLOR_SKY, COLOR_PIPE, COLOR_GROUND, COLOR_BIRD, COLOR_FG, COLOR_SHADOW,
    COLOR_PANEL, COLOR_PANEL_EDGE,
)
from .pipes import Pipe
from .simulation import GameState, WorldView

BIRD_TILT_MIN = -0.6    # radians
BIRD_TILT_MAX = 0.8
BIRD_TILT_DIV = 12.0
FALLBACK_BIRD_SIZE = 40


def bird_tilt(vy: float) -> float:
    """Nose up when rising, down when falling (radians, clockwise positive)."""
    return max(BIRD_TILT_MIN, min(BIRD_TILT_MAX, vy / BIRD_TILT_DIV))


def restart_button_rect(width: int, height: int) -> pygame.Rect:
    btn_w, btn_h = 180, 56
    return pygame.Rect((width - btn_w) // 2, height // 2 + 40, btn_w, btn_h)


class Renderer:
    """Draws a WorldView. Never touches the simulation itself."""
    def __init__(self, assets: Optional[Assets] = None):
        self.assets = assets if assets is not None else Assets()
        if not pygame.font.get_init():
            pygame.font.init()
        self.font_big = pygame.font.Font(None, 64)
        self.font = pygame.font.Font(None, 28)
        self.font_small = pygame.font.Font(None, 20)
        self._scaled = {}

    def scaled(self, key: str, size) -> Optional[pygame.Surface]:
        """Image `key` stretched to `size`, scaled once and reused."""
        src = self.assets.image(key)
        if src is None:
            return None
        if (key, size) not in self._scaled:
            self._scaled[(key, size)] = pygame.transform.scale(src, size)
        return self._scaled[(key, size)]

    def draw(self, surf: pygame.Surface, view: WorldView) -> None:
        cfg = view.config
        w, h = int(cfg.width), int(cfg.height)
        img = self.assets.image

        # --- Background ---
        bg = self.scaled("bg", (w, h))
        if view.state is GameState.IDLE and img("start_bg") is not None:
            bg = self.scaled("start_bg", (w, h))
        if bg is not None:
            surf.blit(bg, (0, 0))
        else:
            surf.fill(COLOR_SKY)

        # --- Pipes ---
        top_img, bottom_img = img("pipe_top"), img("pipe_bottom")
        for pv in view.pipes:
            top, bottom = pipe_rects(Pipe(x=pv.x, top=pv.top), cfg)
            if top_img is not None:
                surf.blit(top_img, (int(pv.x), int(pv.top - top_img.get_height())))
            else:
                pygame.draw.rect(surf, COLOR_PIPE, pygame.Rect(top.as_int_tuple()))
            if bottom_img is not None:
                surf.blit(bottom_img, (int(pv.x), int(bottom.y)))
            else:
                pygame.draw.rect(surf, COLOR_PIPE, pygame.Rect(bottom.as_int_tuple()))

        # --- Ground ---
        gy = int(cfg.ground_y)
        ground = self.scaled("ground", (w, h - gy))
        if ground is not None:
            surf.blit(ground, (0, gy))
        else:
            pygame.draw.rect(surf, COLOR_GROUND, pygame.Rect(0, gy, w, h - gy))

        # --- Bird (centred on x, y) ---
        b = view.bird
        sprite = self.scaled("bird", (int(b.w), int(b.h)))
        if sprite is not None:
            # pygame rotates counter-clockwise for positive angles
            sprite = pygame.transform.rotate(sprite, -math.degrees(bird_tilt(b.vy)))
            surf.blit(sprite, sprite.get_rect(center=(int(b.x), int(b.y))))
        else:
            half = FALLBACK_BIRD_SIZE // 2
            pygame.draw.rect(surf, COLOR_BIRD,
                             pygame.Rect(int(b.x) - half, int(b.y) - half, FALLBACK_BIRD_SIZE, FALLBACK_BIRD_SIZE))

        # --- HUD / overlays ---
        if view.state is GameState.IDLE:
            self._draw_start(surf, w, h)
        else:
            self._text(surf, self.font_big, str(view.score), (w // 2, 60))
        if view.state is GameState.TERMINATED:
            self._draw_end(surf, view, w, h)
        seed_txt = self.font_small.render(f"Seed: {view.seed}", True, COLOR_FG)
        surf.blit(seed_txt, (8, h - seed_txt.get_height() - 6))

    def _text(self, surf, font, msg, center) -> None:
        shadow = font.render(msg, True, COLOR_SHADOW)
        txt = font.render(msg, True, COLOR_FG)
        surf.blit(shadow, shadow.get_rect(center=(center[0] + 2, center[1] + 2)))
        surf.blit(txt, txt.get_rect(center=center))

    def _draw_start(self, surf, w, h) -> None:
        logo = self.assets.image("logo")
        if logo is not None:
            surf.blit(logo, logo.get_rect(center=(w // 2, h // 3)))
        else:
            self._text(surf, self.font_big, "FLAPPY", (w // 2, h // 3))
        self._text(surf, self.font, "SPACE / click / tap to start", (w // 2, h // 2 + 40))

    def _draw_end(self, surf, view: WorldView, w, h) -> None:
        lose = self.assets.image("lose_img")
        if lose is not None:
            surf.blit(lose, lose.get_rect(center=(w // 2, h // 3)))
        else:
            self._text(surf, self.font_big, "GAME OVER", (w // 2, h // 3))
        self._text(surf, self.font, f"Score: {view.score}", (w // 2, h // 2))

        btn = restart_button_rect(w, h)
        pygame.draw.rect(surf, COLOR_PANEL, btn, border_radius=10)
        pygame.draw.rect(surf, COLOR_PANEL_EDGE, btn, width=2, border_radius=10)
        label = self.font.render("Restart (R)", True, COLOR_FG)
        surf.blit(label, label.get_rect(center=btn.center))
