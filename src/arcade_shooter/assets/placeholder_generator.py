"""Generate placeholder frames for sequences the player has not supplied."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw

from arcade_shooter.types import GameResources

FRAME_SIZE = 64

# Color schemes for the generated sequences
PLACEHOLDER_COLORS: dict[str, Tuple[int, int, int]] = {
    "enemy_move": (200, 80, 80),  # Red body
    "enemy_death": (255, 170, 60),  # Orange burst
    "fire_effect": (255, 240, 120),  # Yellow flash
}

MOVE_FRAME_COUNT = 4
DEATH_FRAME_COUNT = 5
FIRE_FRAME_COUNT = 3


class PlaceholderGenerator:
    """Draws simple stand-in frames with Pillow."""

    def __init__(self, size: int = FRAME_SIZE):
        """Initialize the generator.

        Args:
            size: Width and height of each generated frame.
        """
        self.size = size

    def enemy_move_frames(self) -> list[Image.Image]:
        """A walking blob whose legs alternate, facing right."""
        frames = []
        color = PLACEHOLDER_COLORS["enemy_move"]
        outline = (color[0] // 2, color[1] // 2, color[2] // 2)
        s = self.size
        for i in range(MOVE_FRAME_COUNT):
            img = Image.new("RGBA", (s, s), (0, 0, 0, 0))
            draw = ImageDraw.Draw(img)

            # Legs swing back and forth
            swing = (s // 8) * (1 if i % 2 == 0 else -1)
            draw.line([(s // 2 - s // 8, s * 3 // 4), (s // 2 - s // 8 + swing, s - 2)], fill=outline, width=3)
            draw.line([(s // 2 + s // 8, s * 3 // 4), (s // 2 + s // 8 - swing, s - 2)], fill=outline, width=3)

            # Body and eye
            bob = 1 if i % 2 else 0
            draw.ellipse([s // 8, s // 6 + bob, s - s // 8, s * 3 // 4 + bob], fill=color, outline=outline)
            draw.ellipse([s * 5 // 8, s // 3 + bob, s * 3 // 4, s * 11 // 24 + bob], fill=(255, 255, 255))
            frames.append(img)
        return frames

    def enemy_death_frames(self) -> list[Image.Image]:
        """An expanding, fading burst."""
        frames = []
        color = PLACEHOLDER_COLORS["enemy_death"]
        s = self.size
        cx, cy = s // 2, s // 2
        for i in range(DEATH_FRAME_COUNT):
            img = Image.new("RGBA", (s, s), (0, 0, 0, 0))
            draw = ImageDraw.Draw(img)
            t = (i + 1) / DEATH_FRAME_COUNT
            alpha = int(255 * (1.0 - t * 0.8))
            radius = int(s * 0.15 + s * 0.35 * t)
            draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], outline=(*color, alpha), width=3)

            # Debris flying outwards
            for angle in range(0, 360, 45):
                dist = radius * 0.8
                px = cx + int(dist * math.cos(math.radians(angle + i * 10)))
                py = cy + int(dist * math.sin(math.radians(angle + i * 10)))
                draw.rectangle([px - 2, py - 2, px + 2, py + 2], fill=(*color, alpha))
            frames.append(img)
        return frames

    def fire_effect_frames(self) -> list[Image.Image]:
        """A short star-shaped muzzle flash."""
        frames = []
        color = PLACEHOLDER_COLORS["fire_effect"]
        s = self.size
        cx, cy = s // 2, s // 2
        for i in range(FIRE_FRAME_COUNT):
            img = Image.new("RGBA", (s, s), (0, 0, 0, 0))
            draw = ImageDraw.Draw(img)
            r = s // 2 - 2 - i * (s // 10)
            points = []
            for k in range(8):
                angle = math.radians(k * 45 - 90)
                points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
                angle = math.radians(k * 45 + 22.5 - 90)
                points.append((cx + r * 0.4 * math.cos(angle), cy + r * 0.4 * math.sin(angle)))
            draw.polygon(points, fill=(*color, 255 - i * 70))
            frames.append(img)
        return frames

    def fill_missing(self, resources: GameResources) -> GameResources:
        """Give placeholder frames to any empty sequence.

        Background and cursor are left alone; the core already has defaults
        for those.

        Args:
            resources: Resources to fill in place.

        Returns:
            The same resources object.
        """
        if not resources.enemy_move_frames:
            resources.enemy_move_frames = self.enemy_move_frames()
        if not resources.enemy_death_frames:
            resources.enemy_death_frames = self.enemy_death_frames()
        if not resources.fire_effect_frames:
            resources.fire_effect_frames = self.fire_effect_frames()
        return resources

    def write_asset_dir(self, output_dir: Path) -> dict[str, list[Path]]:
        """Save all placeholder sequences in the asset directory layout.

        Args:
            output_dir: Directory to create sub-directories in.

        Returns:
            Sequence name to written file paths.
        """
        sequences = {
            "enemy_move": self.enemy_move_frames(),
            "enemy_death": self.enemy_death_frames(),
            "fire_effect": self.fire_effect_frames(),
        }
        written: dict[str, list[Path]] = {}
        for name, frames in sequences.items():
            seq_dir = Path(output_dir) / name
            seq_dir.mkdir(parents=True, exist_ok=True)
            paths = []
            for index, frame in enumerate(frames, start=1):
                path = seq_dir / f"{name}_{index}.png"
                frame.save(path)
                paths.append(path)
            written[name] = paths
        return written


def generate_placeholders(output_dir: Optional[Path] = None) -> dict[str, list[Path]]:
    """Convenience function to write all placeholder sequences.

    Args:
        output_dir: Output directory. Defaults to ``assets``.

    Returns:
        Sequence name to written file paths.
    """
    return PlaceholderGenerator().write_asset_dir(output_dir or Path("assets"))
