"""Image resources supplied to the game core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from PIL import Image

# A slot is None while its image is still being decoded.
FrameSequence = list[Optional["Image.Image"]]


@dataclass
class GameResources:
    """Images the core reads from. Any of them may be absent."""

    background: Optional[Image.Image] = None
    cursor: Optional[Image.Image] = None
    enemy_move_frames: FrameSequence = field(default_factory=list)
    enemy_death_frames: FrameSequence = field(default_factory=list)
    fire_effect_frames: FrameSequence = field(default_factory=list)

    def has_fire_effect(self) -> bool:
        """Check if a muzzle-flash sequence is configured."""
        return len(self.fire_effect_frames) > 0

    def summary(self) -> dict[str, int]:
        """Count resolved images per resource.

        Returns:
            Mapping of resource name to number of loaded images.
        """
        return {
            "background": int(self.background is not None),
            "cursor": int(self.cursor is not None),
            "enemy_move_frames": sum(1 for f in self.enemy_move_frames if f is not None),
            "enemy_death_frames": sum(1 for f in self.enemy_death_frames if f is not None),
            "fire_effect_frames": sum(1 for f in self.fire_effect_frames if f is not None),
        }
