"""Game controller: simulation loop and top-level state machine."""

from __future__ import annotations

import logging
import random
import time
from typing import TYPE_CHECKING, Callable, Optional

from arcade_shooter.config import GameSettings
from arcade_shooter.types import (
    DEFAULT_CONFIG,
    GameConfig,
    GamePhase,
    GameResources,
    GameSnapshot,
    LEFT_TO_RIGHT,
    Position,
    RIGHT_TO_LEFT,
)
from .effect import Effect
from .enemy import Enemy
from .state import GameStateManager, Listener

if TYPE_CHECKING:
    from arcade_shooter.renderer.surface import Surface
    from .scheduler import FrameHandle, FrameScheduler

logger = logging.getLogger(__name__)


def _default_clock() -> float:
    return time.perf_counter() * 1000.0


class GameController:
    """Owns every enemy and effect and drives them one tick per frame.

    Phases:
        SETTINGS: idle; the initial phase.
        PLAYING: ticks run and reschedule themselves every frame.
        VICTORY: ticking stops, the last frame stays on the surface.

    Only ``start()``, ``return_to_settings()``/``restart()`` and reaching the
    win score change the phase.
    """

    def __init__(
        self,
        surface: Surface,
        scheduler: FrameScheduler,
        resources: Optional[GameResources] = None,
        settings: Optional[GameSettings] = None,
        config: GameConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the controller.

        Args:
            surface: Surface every tick draws onto.
            scheduler: Where the next tick is requested.
            resources: Images to draw with. Read, never modified.
            settings: Enemy speed and animation speed. Read at spawn time.
            config: Fixed gameplay constants.
            rng: Random source for spawn position and direction.
            clock: Millisecond clock used when start() is given no time.
        """
        self.surface = surface
        self.scheduler = scheduler
        self.resources = resources or GameResources()
        self.settings = settings or GameSettings()
        self.config = config
        self.rng = rng or random.Random()
        self._clock = clock or _default_clock

        self._state_manager = GameStateManager()
        self.enemies: list[Enemy] = []
        self.effects: list[Effect] = []
        self.pointer = Position(0.0, 0.0)
        self.last_spawn_time = 0.0
        self.tick_count = 0
        self._pending_frame: Optional[FrameHandle] = None

    # ------------------------------------------------------------------
    # State reporting
    # ------------------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        return self._state_manager.phase

    @property
    def score(self) -> int:
        return self._state_manager.score

    def get_state(self) -> GameSnapshot:
        """Get the current phase and score."""
        return self._state_manager.get_state()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to phase and score changes.

        Args:
            listener: Called with a GameSnapshot after every change.

        Returns:
            An unsubscribe function.
        """
        return self._state_manager.subscribe(listener)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self, now: Optional[float] = None) -> None:
        """Begin a fresh game and run the first tick immediately.

        Args:
            now: Start time in milliseconds. Defaults to the controller clock.
        """
        if now is None:
            now = self._clock()

        self._cancel_pending_frame()
        self._clear_world()
        self.last_spawn_time = now
        self.tick_count = 0
        self._state_manager.update_state(phase=GamePhase.PLAYING, score=0)
        logger.info("Game started")

        self.tick(now)

    def return_to_settings(self) -> None:
        """Stop the game and go back to the settings phase."""
        self._cancel_pending_frame()
        self._clear_world()
        self._state_manager.update_state(phase=GamePhase.SETTINGS, score=0)
        logger.info("Returned to settings")

    def restart(self) -> None:
        """Leave the victory screen (or a running game) for settings."""
        self.return_to_settings()

    def pointer_move(self, x: float, y: float) -> None:
        """Record where the reticle should be drawn."""
        self.pointer = Position(x, y)

    def pointer_click(self, x: float, y: float) -> bool:
        """Fire at a point.

        Args:
            x: Surface x coordinate.
            y: Surface y coordinate.

        Returns:
            True if an enemy was hit.
        """
        if self.phase != GamePhase.PLAYING:
            return False

        if self.resources.has_fire_effect():
            self.effects.append(
                Effect(
                    x,
                    y,
                    self.resources.fire_effect_frames,
                    frame_duration=max(1, self.settings.clamped().anim_speed_ms / 2),
                    size=self.config.effect_size,
                )
            )

        # First match in insertion order wins
        for enemy in self.enemies:
            if enemy.hit_test(x, y):
                enemy.kill()
                self._award_point()
                return True

        return False

    def resize(self, width: int, height: int) -> None:
        """Resize the surface; the next tick uses the new size."""
        self.surface.resize(width, height)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, now: float) -> None:
        """Update and draw one frame, then request the next.

        Does nothing unless playing, so a frame that fires after the game
        stopped is harmless.

        Args:
            now: Frame time in milliseconds.
        """
        if self.phase != GamePhase.PLAYING:
            return

        self._pending_frame = None
        self.tick_count += 1

        self.surface.clear()
        self.surface.draw_background(self.resources.background)

        if now - self.last_spawn_time > self.config.spawn_interval_ms:
            self.spawn_enemy()
            self.last_spawn_time = now

        self._update_enemies(now)
        self._update_effects(now)
        self._draw_cursor()

        if self.phase == GamePhase.PLAYING:
            self._pending_frame = self.scheduler.request_frame(self.tick)

    def spawn_enemy(self) -> Enemy:
        """Create one enemy just off a random screen edge.

        Speed and animation speed are read now, so changing them mid-game
        only affects enemies spawned afterwards.

        Returns:
            The new enemy, already added to the active set.
        """
        config = self.config
        settings = self.settings.clamped()

        min_y = config.min_spawn_y
        max_y = self.surface.height - config.enemy_height - config.spawn_bottom_margin
        y = self.rng.uniform(min_y, max_y)

        direction = LEFT_TO_RIGHT if self.rng.random() < 0.5 else RIGHT_TO_LEFT
        x = -config.enemy_width if direction == LEFT_TO_RIGHT else self.surface.width

        enemy = Enemy(
            x,
            y,
            direction,
            move_frames=self.resources.enemy_move_frames,
            death_frames=self.resources.enemy_death_frames,
            speed=settings.enemy_speed,
            frame_duration=settings.anim_speed_ms,
            width=config.enemy_width,
            height=config.enemy_height,
        )
        self.enemies.append(enemy)
        logger.debug("Spawned %r", enemy)
        return enemy

    def _update_enemies(self, now: float) -> None:
        """Update, draw and prune enemies, newest first."""
        surface_width = self.surface.width
        for i in range(len(self.enemies) - 1, -1, -1):
            enemy = self.enemies[i]
            try:
                enemy.update(now)
                enemy.render(self.surface)
            except Exception:
                logger.exception("Dropping enemy that failed to update: %r", enemy)
                del self.enemies[i]
                continue

            if enemy.is_dead:
                del self.enemies[i]
            elif enemy.is_alive and enemy.is_offscreen(surface_width):
                logger.debug("Enemy escaped: %r", enemy)
                del self.enemies[i]

    def _update_effects(self, now: float) -> None:
        """Update, draw and prune effects, newest first."""
        for i in range(len(self.effects) - 1, -1, -1):
            effect = self.effects[i]
            try:
                effect.update(now)
                effect.render(self.surface)
            except Exception:
                logger.exception("Dropping effect that failed to update")
                del self.effects[i]
                continue

            if effect.finished:
                del self.effects[i]

    def _draw_cursor(self) -> None:
        cursor = self.resources.cursor
        x, y = self.pointer.x, self.pointer.y
        if cursor is None:
            self.surface.draw_crosshair(x, y)
            return
        size = self.config.cursor_size
        self.surface.draw_image(cursor, x - size / 2, y - size / 2, size, size)

    def _award_point(self) -> None:
        score = self.score + 1
        if score >= self.config.win_score:
            self._cancel_pending_frame()
            self._state_manager.update_state(phase=GamePhase.VICTORY, score=score)
            logger.info("Victory with score %d", score)
        else:
            self._state_manager.update_state(score=score)
            logger.debug("Hit, score %d", score)

    def _clear_world(self) -> None:
        self.enemies = []
        self.effects = []

    def _cancel_pending_frame(self) -> None:
        if self._pending_frame is not None:
            self._pending_frame.cancel()
            self._pending_frame = None
