# flappy/game/assets.py
"""
Asset loading happens before the simulation exists: load_assets() resolves
every image and sound (or a fallback), then config_from_assets() derives the
world constants that depend on them. Nothing here is touched from a tick.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import pygame

from .config import GROUND_HEIGHT, PIPE_EVICT_X, PIPE_WIDTH, WorldConfig
from .simulation import GameHooks

logger = logging.getLogger(__name__)

IMAGE_FILES = {
    "bg": "bg.png",
    "start_bg": "start_bg.png",
    "ground": "ground.png",
    "bird": "bird.png",
    "pipe_top": "pipe_top.png",
    "pipe_bottom": "pipe_bottom.png",
    "logo": "logo.png",
    "lose_img": "lose_img.png",
}

SOUND_FILES = {
    "bg_music": "bg_music.mp3",
    "jump": "jump.mp3",
    "point": "point.mp3",
    "die": "die.mp3",
    "lose": "lose.mp3",
}

MUSIC_VOLUME = 0.5


@dataclass
class Assets:
    images: Dict[str, Optional[pygame.Surface]] = field(default_factory=dict)
    sounds: Dict[str, Optional[pygame.mixer.Sound]] = field(default_factory=dict)
    audio_ok: bool = False

    def image(self, key: str) -> Optional[pygame.Surface]:
        return self.images.get(key)

    def sound(self, key: str) -> Optional[pygame.mixer.Sound]:
        return self.sounds.get(key)


def _load_image(path: Path) -> Optional[pygame.Surface]:
    if not path.exists():
        logger.warning("image missing: %s", path)
        return None
    try:
        return pygame.image.load(str(path))
    except pygame.error as e:
        logger.warning("image load failed %s: %s", path, e)
        return None


def _load_sound(path: Path) -> Optional[pygame.mixer.Sound]:
    if not path.exists():
        logger.warning("sound missing: %s", path)
        return None
    try:
        return pygame.mixer.Sound(str(path))
    except pygame.error as e:
        logger.warning("sound load failed %s: %s", path, e)
        return None


def load_assets(images_dir: Optional[Path] = None, sounds_dir: Optional[Path] = None) -> Assets:
    """Resolve every asset up front. Failures become None, never exceptions."""
    assets = Assets()

    for key, name in IMAGE_FILES.items():
        assets.images[key] = _load_image(images_dir / name) if images_dir is not None else None

    if sounds_dir is not None:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            assets.audio_ok = True
        except pygame.error as e:
            logger.warning("audio disabled: %s", e)

    for key, name in SOUND_FILES.items():
        assets.sounds[key] = _load_sound(sounds_dir / name) if assets.audio_ok else None

    loaded = sum(v is not None for v in assets.images.values())
    logger.info("assets ready: %d/%d images, audio=%s", loaded, len(IMAGE_FILES), assets.audio_ok)
    return assets


def config_from_assets(assets: Assets, **overrides) -> WorldConfig:
    """Ground height and pipe width come from the images when present, else the fallbacks."""
    ground = assets.image("ground")
    pipe = assets.image("pipe_top")
    params = {
        "ground_height": ground.get_height() if ground is not None else GROUND_HEIGHT,
        "pipe_width": pipe.get_width() if pipe is not None else PIPE_WIDTH,
    }
    params["evict_x"] = min(PIPE_EVICT_X, -params["pipe_width"])
    params.update(overrides)
    return WorldConfig(**params)


class SoundHooks(GameHooks):
    """Music on run start, effects on flap/score/death. Missing sounds are skipped."""
    def __init__(self, assets: Assets):
        self.assets = assets
        self.music_playing = False

    def _play(self, key: str) -> Optional[pygame.mixer.Channel]:
        snd = self.assets.sound(key)
        if snd is None:
            return None
        snd.stop()      # rewind
        return snd.play()

    def on_start(self) -> None:
        if self.assets.audio_ok:
            pygame.mixer.unpause()
        music = self.assets.sound("bg_music")
        if music is not None:
            music.set_volume(MUSIC_VOLUME)
            music.stop()
            music.play(loops=-1)
        self.music_playing = True

    def on_flap(self) -> None:
        self._play("jump")

    def on_score(self, score: int) -> None:
        self._play("point")

    def on_terminate(self, score: int) -> None:
        music = self.assets.sound("bg_music")
        if music is not None:
            music.stop()
        self.music_playing = False
        ch = self._play("die")
        lose = self.assets.sound("lose")
        if ch is not None and lose is not None:
            ch.queue(lose)
        elif lose is not None:
            lose.play()

    def on_focus_lost(self) -> None:
        if self.assets.audio_ok:
            pygame.mixer.pause()

    def on_focus_gained(self) -> None:
        if self.assets.audio_ok and self.music_playing:
            pygame.mixer.unpause()
