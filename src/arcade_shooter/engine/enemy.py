"""Enemy entity: moves across the screen until shot or gone."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from arcade_shooter.types import DEFAULT_CONFIG, EnemyState, RIGHT_TO_LEFT
from .animation import AnimationPlayer

if TYPE_CHECKING:
    from PIL import Image

    from arcade_shooter.renderer.surface import Surface


class Enemy:
    """A moving, animated target.

    State only ever moves ALIVE -> DYING -> DEAD. Position changes only while
    alive; a dying enemy stays where it was shot and plays its death sequence.
    """

    def __init__(
        self,
        x: float,
        y: float,
        direction: int,
        move_frames: Optional[Sequence[Optional[Image.Image]]] = None,
        death_frames: Optional[Sequence[Optional[Image.Image]]] = None,
        speed: float = 3.0,
        frame_duration: float = 150,
        width: int = DEFAULT_CONFIG.enemy_width,
        height: int = DEFAULT_CONFIG.enemy_height,
    ):
        """Initialize the enemy.

        Args:
            x: Left edge at spawn.
            y: Top edge at spawn.
            direction: 1 travels left to right, -1 right to left.
            move_frames: Looping walk cycle.
            death_frames: One-shot death sequence.
            speed: Pixels moved per update.
            frame_duration: Milliseconds per animation frame.
            width: Bounding box width.
            height: Bounding box height.
        """
        self.x = float(x)
        self.y = float(y)
        self.direction = direction
        self.speed = speed
        self.width = width
        self.height = height
        self.state = EnemyState.ALIVE

        self.move_animation = AnimationPlayer(move_frames, frame_duration, looping=True)
        self.death_animation = AnimationPlayer(death_frames, frame_duration, looping=False)

    @property
    def is_alive(self) -> bool:
        return self.state == EnemyState.ALIVE

    @property
    def is_dead(self) -> bool:
        return self.state == EnemyState.DEAD

    def update(self, now: float) -> None:
        """Advance movement or the death sequence.

        Args:
            now: Current time in milliseconds.
        """
        if self.state == EnemyState.ALIVE:
            self.x += self.speed * self.direction
            self.move_animation.advance(now)
        elif self.state == EnemyState.DYING:
            # Nothing to play means nothing to wait for
            if self.death_animation.is_empty or self.death_animation.advance(now):
                self.state = EnemyState.DEAD

    def render(self, surface: Surface) -> None:
        """Draw the animation matching the current state."""
        if self.state == EnemyState.DEAD:
            return

        animation = self.move_animation if self.state == EnemyState.ALIVE else self.death_animation
        animation.render(
            surface,
            self.x,
            self.y,
            self.width,
            self.height,
            mirrored=self.direction == RIGHT_TO_LEFT,
        )

    def hit_test(self, px: float, py: float) -> bool:
        """Check if a point lies inside this enemy's box.

        Args:
            px: Point x.
            py: Point y.

        Returns:
            True only while alive and the point is inside (edges included).
        """
        if self.state != EnemyState.ALIVE:
            return False
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )

    def kill(self) -> None:
        """Start dying. Does nothing unless currently alive."""
        if self.state != EnemyState.ALIVE:
            return
        self.state = EnemyState.DYING
        self.death_animation.reset()

    def is_offscreen(self, surface_width: float) -> bool:
        """Check if the enemy has fully left the screen in its travel direction."""
        if self.direction == RIGHT_TO_LEFT:
            return self.x + self.width < 0
        return self.x > surface_width

    def __repr__(self) -> str:
        return (
            f"Enemy(x={self.x:.1f}, y={self.y:.1f}, direction={self.direction}, "
            f"state={self.state.value})"
        )
