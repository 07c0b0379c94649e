"""Main application package."""

from __future__ import annotations

from .game_loop import GameLoop
from .input import InputEvent, InputKind, TerminalInput, parse_input
from .application import Application

__all__ = [
    "GameLoop",
    "InputEvent",
    "InputKind",
    "TerminalInput",
    "parse_input",
    "Application",
]
