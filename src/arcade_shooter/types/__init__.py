"""Type definitions for Arcade Shooter."""

from .entities import (
    EnemyState,
    Position,
    LEFT_TO_RIGHT,
    RIGHT_TO_LEFT,
)
from .game import (
    GamePhase,
    GameConfig,
    GameSnapshot,
    DEFAULT_CONFIG,
)
from .resources import (
    FrameSequence,
    GameResources,
)

__all__ = [
    # Entities
    "EnemyState",
    "Position",
    "LEFT_TO_RIGHT",
    "RIGHT_TO_LEFT",
    # Game
    "GamePhase",
    "GameConfig",
    "GameSnapshot",
    "DEFAULT_CONFIG",
    # Resources
    "FrameSequence",
    "GameResources",
]
