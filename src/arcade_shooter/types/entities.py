"""Entity types for game objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EnemyState(Enum):
    """Lifecycle of an enemy. Only ever moves forward."""

    ALIVE = "alive"
    DYING = "dying"
    DEAD = "dead"


# Horizontal travel directions
LEFT_TO_RIGHT = 1
RIGHT_TO_LEFT = -1


@dataclass
class Position:
    """2D position on the surface."""

    x: float
    y: float
