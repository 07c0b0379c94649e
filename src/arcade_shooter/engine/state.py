"""Top-level game state with subscription support."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from arcade_shooter.types import GamePhase, GameSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[GameSnapshot], None]


class GameStateManager:
    """Holds the phase and score and tells listeners when they change."""

    def __init__(self, phase: GamePhase = GamePhase.SETTINGS, score: int = 0):
        """Initialize with a starting phase and score.

        Args:
            phase: Initial phase.
            score: Initial score.
        """
        self._state = GameSnapshot(phase=phase, score=score)
        self._listeners: list[Listener] = []

    def get_state(self) -> GameSnapshot:
        """Get the current state.

        Returns:
            An immutable snapshot.
        """
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def score(self) -> int:
        return self._state.score

    def update_state(self, phase: Optional[GamePhase] = None, score: Optional[int] = None) -> None:
        """Change phase and/or score, notifying listeners if anything changed.

        Args:
            phase: New phase, or None to keep it.
            score: New score, or None to keep it.
        """
        changes = {}
        if phase is not None and phase != self._state.phase:
            changes["phase"] = phase
        if score is not None and score != self._state.score:
            changes["score"] = score
        if not changes:
            return

        self._state = replace(self._state, **changes)
        self._notify_listeners()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to state changes.

        Args:
            listener: A function to call when state changes.

        Returns:
            An unsubscribe function.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify_listeners(self) -> None:
        """Notify all listeners of state change."""
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)
