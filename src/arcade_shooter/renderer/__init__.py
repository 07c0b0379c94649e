"""Rendering for Arcade Shooter."""

from __future__ import annotations

from .surface import Surface
from .hud import HudOverlay
from .display import TerminalDisplay

__all__ = [
    "Surface",
    "HudOverlay",
    "TerminalDisplay",
]
