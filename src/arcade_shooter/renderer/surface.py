"""2D drawing surface backed by a Pillow frame buffer."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

# Default look when no background image is configured
BACKGROUND_COLOR = (26, 26, 46)
GRID_COLOR = (31, 41, 49)  # rgba(76, 175, 80, 0.1) blended over the background
GRID_SIZE = 50

CROSSHAIR_COLOR = (255, 0, 0, 255)
CROSSHAIR_RADIUS = 15
CROSSHAIR_ARM = 20

# Scaled copies kept per surface; dropped wholesale past this size
MAX_SCALED_CACHE = 256


def make_default_background(width: int, height: int) -> Image.Image:
    """Build the plain dark background with a faint grid.

    Args:
        width: Width in pixels.
        height: Height in pixels.

    Returns:
        An RGBA image of the given size.
    """
    pixels = np.empty((max(1, height), max(1, width), 4), dtype=np.uint8)
    pixels[:, :, :3] = BACKGROUND_COLOR
    pixels[:, :, 3] = 255
    pixels[:, ::GRID_SIZE, :3] = GRID_COLOR
    pixels[::GRID_SIZE, :, :3] = GRID_COLOR
    return Image.fromarray(pixels)


class Surface:
    """The frame buffer everything in the game draws onto.

    Sized to the viewport and resizable at any time; subsequent draws use the
    new dimensions.
    """

    def __init__(self, width: int = 800, height: int = 600):
        """Initialize the surface.

        Args:
            width: Width in pixels.
            height: Height in pixels.
        """
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.frame = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))
        self.draw = ImageDraw.Draw(self.frame)
        self._scaled_cache: dict[tuple[int, int, int, bool], tuple[Image.Image, Image.Image]] = {}
        self._default_background: Image.Image | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def resize(self, width: int, height: int) -> None:
        """Resize the frame buffer. Contents are discarded.

        Args:
            width: New width in pixels.
            height: New height in pixels.
        """
        width, height = max(1, int(width)), max(1, int(height))
        if (width, height) == self.size:
            return
        self.width = width
        self.height = height
        self.frame.close()
        self.frame = Image.new("RGBA", (width, height), (0, 0, 0, 255))
        self.draw = ImageDraw.Draw(self.frame)
        self._scaled_cache.clear()
        self._default_background = None

    def clear(self) -> None:
        """Clear the surface to transparent black."""
        self.draw.rectangle([0, 0, self.width, self.height], fill=(0, 0, 0, 0))

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        mirrored: bool = False,
    ) -> None:
        """Draw an image scaled into a box.

        Args:
            image: Source image.
            x: Left edge of the box.
            y: Top edge of the box.
            width: Box width.
            height: Box height.
            mirrored: Flip horizontally within the box.
        """
        w, h = int(round(width)), int(round(height))
        if w <= 0 or h <= 0:
            return

        scaled = self._scaled(image, w, h, mirrored)
        self.frame.paste(scaled, (int(round(x)), int(round(y))), scaled)

    def _scaled(self, image: Image.Image, w: int, h: int, mirrored: bool) -> Image.Image:
        """Get a scaled (and possibly mirrored) RGBA copy of an image."""
        key = (id(image), w, h, mirrored)
        cached = self._scaled_cache.get(key)
        if cached is not None and cached[0] is image:
            return cached[1]

        scaled = image if image.mode == "RGBA" else image.convert("RGBA")
        if scaled.size != (w, h):
            scaled = scaled.resize((w, h))
        if mirrored:
            scaled = scaled.transpose(Image.Transpose.FLIP_LEFT_RIGHT)

        if len(self._scaled_cache) >= MAX_SCALED_CACHE:
            self._scaled_cache.clear()
        self._scaled_cache[key] = (image, scaled)
        return scaled

    def draw_background(self, image: Image.Image | None = None) -> None:
        """Fill the whole surface with a background.

        Args:
            image: Background stretched to the surface, or None for the
                default grid.
        """
        if image is not None:
            self.draw_image(image, 0, 0, self.width, self.height)
            return

        if self._default_background is None:
            self._default_background = make_default_background(self.width, self.height)
        self.frame.paste(self._default_background, (0, 0))

    def draw_crosshair(self, x: float, y: float) -> None:
        """Draw the default red reticle centred on a point."""
        r = CROSSHAIR_RADIUS
        arm = CROSSHAIR_ARM
        self.draw.ellipse([x - r, y - r, x + r, y + r], outline=CROSSHAIR_COLOR, width=2)
        self.draw.line([(x - arm, y), (x + arm, y)], fill=CROSSHAIR_COLOR, width=2)
        self.draw.line([(x, y - arm), (x, y + arm)], fill=CROSSHAIR_COLOR, width=2)

    def snapshot(self) -> Image.Image:
        """Get a copy of the current frame."""
        return self.frame.copy()

    def to_array(self) -> np.ndarray:
        """Get the current frame as an (height, width, 4) uint8 array."""
        return np.asarray(self.frame)
