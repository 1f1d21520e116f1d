# flappy/game/exceptions.py
class ConfigError(ValueError):
    """World constants that cannot produce a playable world."""
