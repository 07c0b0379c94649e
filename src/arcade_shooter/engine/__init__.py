"""Game engine for Arcade Shooter."""

from __future__ import annotations

from .animation import AnimationPlayer
from .enemy import Enemy
from .effect import Effect
from .state import GameStateManager
from .scheduler import FrameScheduler, ManualFrameScheduler
from .controller import GameController

__all__ = [
    "AnimationPlayer",
    "Enemy",
    "Effect",
    "GameStateManager",
    "FrameScheduler",
    "ManualFrameScheduler",
    "GameController",
]
