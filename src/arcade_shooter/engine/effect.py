"""Transient one-shot visual effects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from arcade_shooter.types import DEFAULT_CONFIG
from .animation import AnimationPlayer

if TYPE_CHECKING:
    from PIL import Image

    from arcade_shooter.renderer.surface import Surface


class Effect:
    """A non-interactive animation centred on a point, e.g. a muzzle flash."""

    def __init__(
        self,
        x: float,
        y: float,
        frames: Optional[Sequence[Optional[Image.Image]]] = None,
        frame_duration: float = 75,
        size: int = DEFAULT_CONFIG.effect_size,
    ):
        self.x = x
        self.y = y
        self.width = size
        self.height = size
        self.animation = AnimationPlayer(frames, frame_duration, looping=False)
        self.finished = self.animation.is_empty

    def update(self, now: float) -> None:
        """Advance the animation; mark finished when it completes."""
        if self.finished:
            return
        # The shared frame list can be compacted to empty after construction
        if self.animation.is_empty or self.animation.advance(now):
            self.finished = True

    def render(self, surface: Surface) -> None:
        if self.finished:
            return
        self.animation.render(
            surface,
            self.x - self.width / 2,
            self.y - self.height / 2,
            self.width,
            self.height,
        )
