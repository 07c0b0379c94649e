"""Frame-sequence animation playback."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Sequence

if TYPE_CHECKING:
    from PIL import Image

    from arcade_shooter.renderer.surface import Surface


class AnimationPlayer:
    """Plays an ordered sequence of images on a wall-clock cadence.

    Frames advance at most once per call to ``advance()``, and only when at
    least ``frame_duration`` milliseconds have passed since the last advance.
    A looping player wraps around; a one-shot player stops on its last frame
    and reports completion exactly once.

    All operations tolerate an empty sequence or unresolved (``None``) frames
    by doing nothing.
    """

    def __init__(
        self,
        frames: Sequence[Optional[Image.Image]] | None = None,
        frame_duration: float = 150,
        looping: bool = True,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        """Initialize the player.

        Args:
            frames: Images in playback order. A list is shared, not copied,
                so slots that finish loading later show up on their own.
            frame_duration: Milliseconds each frame is shown.
            looping: Wrap to the first frame instead of stopping.
            on_complete: Called once when a one-shot animation finishes.
        """
        if frames is None:
            frames = []
        elif not isinstance(frames, list):
            frames = list(frames)
        self.frames: list[Optional[Image.Image]] = frames
        self.frame_duration = frame_duration
        self.looping = looping
        self.on_complete = on_complete

        self.current_frame = 0
        self.last_advance = 0.0
        self.playing = True
        self.finished = False

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def is_empty(self) -> bool:
        return not self.frames

    def advance(self, now: float) -> bool:
        """Move to the next frame if enough time has passed.

        Args:
            now: Current time in milliseconds.

        Returns:
            True only on the call that completes a one-shot animation.
        """
        if not self.playing or not self.frames:
            return False

        if now - self.last_advance < self.frame_duration:
            return False

        self.last_advance = now
        self.current_frame += 1

        if self.current_frame < len(self.frames):
            return False

        if self.looping:
            self.current_frame = 0
            return False

        self.current_frame = len(self.frames) - 1
        self.playing = False
        self.finished = True
        if self.on_complete is not None:
            self.on_complete()
        return True

    def current_image(self) -> Optional[Image.Image]:
        """Get the image for the current frame, if it is resolved."""
        if 0 <= self.current_frame < len(self.frames):
            return self.frames[self.current_frame]
        return None

    def render(
        self,
        surface: Surface,
        x: float,
        y: float,
        width: float,
        height: float,
        mirrored: bool = False,
    ) -> None:
        """Draw the current frame scaled into a box.

        Args:
            surface: Surface to draw on.
            x: Left edge of the box.
            y: Top edge of the box.
            width: Box width.
            height: Box height.
            mirrored: Flip horizontally about the box itself.
        """
        image = self.current_image()
        if image is None:
            return
        surface.draw_image(image, x, y, width, height, mirrored=mirrored)

    def reset(self) -> None:
        """Rewind to the first frame and start playing again."""
        self.current_frame = 0
        self.last_advance = 0.0
        self.playing = True
        self.finished = False

    def stop(self) -> None:
        """Pause on the current frame."""
        self.playing = False
