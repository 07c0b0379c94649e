"""Top-level game state types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GamePhase(Enum):
    """Top-level states of the game."""

    SETTINGS = "settings"
    PLAYING = "playing"
    VICTORY = "victory"


@dataclass(frozen=True)
class GameConfig:
    """Fixed gameplay constants.

    Sizes are in pixels, times in milliseconds.
    """

    win_score: int = 10
    enemy_width: int = 80
    enemy_height: int = 80
    cursor_size: int = 40
    effect_size: int = 60
    spawn_interval_ms: float = 2000.0
    min_spawn_y: float = 100.0
    spawn_bottom_margin: float = 50.0


DEFAULT_CONFIG = GameConfig()


@dataclass(frozen=True)
class GameSnapshot:
    """What the host UI is told whenever phase or score changes."""

    phase: GamePhase
    score: int

    @property
    def is_playing(self) -> bool:
        return self.phase == GamePhase.PLAYING
