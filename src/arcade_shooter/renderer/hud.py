"""HUD and panel overlays drawn over the game frame for display."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from PIL import Image, ImageDraw, ImageFont

from arcade_shooter.types import GamePhase, GameSnapshot

if TYPE_CHECKING:
    from arcade_shooter.config import GameSettings

COLORS = {
    "panel_bg": (20, 24, 38, 220),
    "panel_border": (76, 175, 80, 255),
    "title": (255, 215, 0, 255),
    "text": (230, 230, 230, 255),
    "hint": (150, 160, 170, 255),
    "score": (255, 255, 255, 255),
    "dim": (0, 0, 0, 140),
}

LINE_HEIGHT = 16
PADDING = 14


class HudOverlay:
    """Composites score, settings and victory panels onto a frame copy.

    The game surface itself is never touched, so the last frame of a game
    survives underneath the victory banner.
    """

    def __init__(self):
        self.font = ImageFont.load_default()

    def compose(
        self,
        frame: Image.Image,
        state: GameSnapshot,
        settings: GameSettings,
        win_score: int,
        resource_summary: Optional[dict[str, int]] = None,
    ) -> Image.Image:
        """Build the image to display for the current phase.

        Args:
            frame: Current game frame. Not modified.
            state: Phase and score.
            settings: Tunables shown on the settings panel.
            win_score: Score needed to win.
            resource_summary: Loaded image counts per resource.

        Returns:
            A new RGBA image.
        """
        image = frame.convert("RGBA") if frame.mode != "RGBA" else frame.copy()

        if state.phase == GamePhase.PLAYING:
            self._draw_score(image, state.score, win_score)
        elif state.phase == GamePhase.SETTINGS:
            image = self._dim(image)
            self._draw_settings_panel(image, settings, win_score, resource_summary or {})
        else:
            image = self._dim(image)
            self._draw_victory_panel(image, state.score)
        return image

    def _dim(self, image: Image.Image) -> Image.Image:
        overlay = Image.new("RGBA", image.size, COLORS["dim"])
        return Image.alpha_composite(image, overlay)

    def _text_width(self, draw: ImageDraw.ImageDraw, text: str) -> int:
        left, _, right, _ = draw.textbbox((0, 0), text, font=self.font)
        return right - left

    def _draw_panel(self, image: Image.Image, lines: list[tuple[str, str]]) -> None:
        """Draw a centred panel of (text, color key) lines."""
        draw = ImageDraw.Draw(image)
        width = max(self._text_width(draw, text) for text, _ in lines) + PADDING * 2
        height = len(lines) * LINE_HEIGHT + PADDING * 2

        x1 = (image.width - width) // 2
        y1 = (image.height - height) // 2
        draw.rounded_rectangle(
            [x1, y1, x1 + width, y1 + height],
            radius=8,
            fill=COLORS["panel_bg"],
            outline=COLORS["panel_border"],
            width=2,
        )

        y = y1 + PADDING
        for text, color in lines:
            tx = (image.width - self._text_width(draw, text)) // 2
            draw.text((tx, y), text, fill=COLORS[color], font=self.font)
            y += LINE_HEIGHT

    def _draw_score(self, image: Image.Image, score: int, win_score: int) -> None:
        draw = ImageDraw.Draw(image)
        text = f"SCORE {score} / {win_score}"
        width = self._text_width(draw, text) + PADDING * 2
        draw.rounded_rectangle(
            [10, 10, 10 + width, 10 + LINE_HEIGHT + PADDING],
            radius=6,
            fill=COLORS["panel_bg"],
            outline=COLORS["panel_border"],
        )
        draw.text((10 + PADDING, 10 + PADDING // 2), text, fill=COLORS["score"], font=self.font)

    def _draw_settings_panel(
        self,
        image: Image.Image,
        settings: GameSettings,
        win_score: int,
        resource_summary: dict[str, int],
    ) -> None:
        lines = [
            ("ARCADE SHOOTER", "title"),
            ("", "text"),
            (f"Shoot {win_score} enemies to win", "text"),
            (f"Enemy speed: {settings.enemy_speed:g} px/frame   [-] [=]", "text"),
            (f"Frame duration: {settings.anim_speed_ms} ms   [[] []]", "text"),
        ]
        if resource_summary:
            loaded = ", ".join(f"{name} {count}" for name, count in resource_summary.items() if count)
            lines.append((f"Assets: {loaded or 'defaults'}", "hint"))
        lines += [
            ("", "text"),
            ("[S] start   [Q] quit", "hint"),
        ]
        self._draw_panel(image, lines)

    def _draw_victory_panel(self, image: Image.Image, score: int) -> None:
        self._draw_panel(
            image,
            [
                ("VICTORY!", "title"),
                (f"Final score: {score}", "text"),
                ("", "text"),
                ("[R] back to settings   [Q] quit", "hint"),
            ],
        )
