"""Image loading for game resources."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from arcade_shooter.types import FrameSequence, GameResources

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")

# Single images: <name>.<ext> in the asset directory
SINGLE_IMAGES = ("background", "cursor")

# Sequences: a sub-directory of frames, ordered by file name
SEQUENCES = ("enemy_move", "enemy_death", "fire_effect")

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> list[Union[str, int]]:
    """Sort key that orders embedded numbers numerically.

    ``frame2.png`` sorts before ``frame10.png``. Letters compare
    case-insensitively.

    Args:
        name: File name.

    Returns:
        Alternating text and number parts.
    """
    parts = _DIGITS.split(name)
    return [int(part) if i % 2 else part.lower() for i, part in enumerate(parts)]


def is_image_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


class AssetLoader:
    """Loads backgrounds, cursors and frame sequences from a directory.

    Layout::

        assets/
            background.png
            cursor.png
            enemy_move/   frame1.png frame2.png ...
            enemy_death/  ...
            fire_effect/  ...

    Everything is optional.
    """

    def __init__(self, asset_path: Optional[Path] = None):
        """Initialize the loader.

        Args:
            asset_path: Base directory of the assets.
        """
        self._asset_path = Path(asset_path) if asset_path is not None else Path("assets")

    @property
    def asset_path(self) -> Path:
        return self._asset_path

    def load_image(self, path: Path) -> Optional[Image.Image]:
        """Decode one image as RGBA.

        Args:
            path: Image file.

        Returns:
            The decoded image, or None if it cannot be read.
        """
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except (OSError, UnidentifiedImageError, ValueError):
            logger.exception("Could not load image %s", path)
            return None

    def find_image(self, name: str) -> Optional[Path]:
        """Find ``<name>.<ext>`` in the asset directory.

        Args:
            name: File stem, e.g. ``background``.

        Returns:
            The first match in natural order, or None.
        """
        if not self._asset_path.is_dir():
            return None
        matches = [p for p in self._asset_path.glob(f"{name}.*") if is_image_file(p)]
        if not matches:
            return None
        return sorted(matches, key=lambda p: natural_sort_key(p.name))[0]

    def sequence_paths(self, name: str) -> list[Path]:
        """List the frame files of a sequence in natural order.

        Args:
            name: Sequence directory name, e.g. ``enemy_move``.

        Returns:
            Ordered frame paths. Empty if the directory is missing.
        """
        seq_dir = self._asset_path / name
        if not seq_dir.is_dir():
            return []
        paths = [p for p in seq_dir.iterdir() if is_image_file(p)]
        return sorted(paths, key=lambda p: natural_sort_key(p.name))

    def load_sequence(self, name: str) -> FrameSequence:
        """Load a whole sequence, skipping frames that fail to decode."""
        frames = (self.load_image(path) for path in self.sequence_paths(name))
        return [frame for frame in frames if frame is not None]

    def load(self) -> GameResources:
        """Load all resources synchronously.

        Returns:
            The loaded resources. Missing ones stay empty.
        """
        resources = GameResources()
        for name in SINGLE_IMAGES:
            path = self.find_image(name)
            if path is not None:
                setattr(resources, name, self.load_image(path))
        for name in SEQUENCES:
            setattr(resources, f"{name}_frames", self.load_sequence(name))

        logger.info("Loaded resources from %s: %s", self._asset_path, resources.summary())
        return resources

    async def load_async(self, resources: Optional[GameResources] = None) -> GameResources:
        """Load all resources without blocking the event loop.

        Each sequence gets one ``None`` slot per file straight away; slots are
        filled as worker threads finish decoding, then failed slots are
        dropped. Anything already playing a sequence sees frames appear as
        they resolve.

        Args:
            resources: Resources to fill in place. A new object if None.

        Returns:
            The filled resources.
        """
        if resources is None:
            resources = GameResources()

        jobs = []
        for name in SINGLE_IMAGES:
            path = self.find_image(name)
            if path is not None:
                jobs.append(self._load_single_async(resources, name, path))

        for name in SEQUENCES:
            paths = self.sequence_paths(name)
            if not paths:
                continue
            slots: FrameSequence = [None] * len(paths)
            setattr(resources, f"{name}_frames", slots)
            jobs.append(self._load_sequence_async(slots, paths))

        await asyncio.gather(*jobs)
        logger.info("Loaded resources from %s: %s", self._asset_path, resources.summary())
        return resources

    async def _load_single_async(self, resources: GameResources, name: str, path: Path) -> None:
        image = await asyncio.to_thread(self.load_image, path)
        setattr(resources, name, image)

    async def _load_sequence_async(self, slots: FrameSequence, paths: list[Path]) -> None:
        async def fill(index: int, path: Path) -> None:
            slots[index] = await asyncio.to_thread(self.load_image, path)

        await asyncio.gather(*(fill(i, path) for i, path in enumerate(paths)))
        # Compact in place so players holding this list keep working
        slots[:] = [frame for frame in slots if frame is not None]
