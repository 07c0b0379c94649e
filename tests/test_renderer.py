"""Tests for the surface, HUD and terminal display."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from arcade_shooter.config import GameSettings
from arcade_shooter.renderer import HudOverlay, Surface, TerminalDisplay
from arcade_shooter.renderer import display as display_module
from arcade_shooter.renderer import terminal_size
from arcade_shooter.renderer.display import CLEAR_SCREEN, HOME, detect_graphics_protocol, tmux_wrap
from arcade_shooter.renderer.surface import BACKGROUND_COLOR, GRID_COLOR, GRID_SIZE, make_default_background
from arcade_shooter.types import GamePhase, GameSnapshot

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def split_image() -> Image.Image:
    """A 2x1 image, red on the left and blue on the right."""
    image = Image.new("RGBA", (2, 1), RED)
    image.putpixel((1, 0), BLUE)
    return image


class TestSurface:
    """Tests for Surface."""

    def test_default_background_grid(self):
        """Test grid lines fall on multiples of the grid size."""
        pixels = np.asarray(make_default_background(120, 80))

        assert pixels.shape == (80, 120, 4)
        assert tuple(pixels[1, 1]) == (*BACKGROUND_COLOR, 255)
        assert tuple(pixels[1, GRID_SIZE]) == (*GRID_COLOR, 255)
        assert tuple(pixels[GRID_SIZE, 1]) == (*GRID_COLOR, 255)

    def test_clear_is_transparent(self, surface):
        """Test clear wipes to transparent black."""
        surface.draw_background(None)
        surface.clear()
        assert surface.to_array()[10, 10].tolist() == [0, 0, 0, 0]

    def test_draw_image_scales(self):
        """Test an image is stretched into its box."""
        surface = Surface(10, 10)
        surface.draw_image(Image.new("RGBA", (2, 2), RED), 1, 1, 8, 4)

        assert surface.frame.getpixel((1, 1)) == RED
        assert surface.frame.getpixel((8, 4)) == RED
        assert surface.frame.getpixel((9, 5)) != RED
        assert surface.frame.getpixel((0, 0)) != RED

    def test_draw_image_mirrored(self, split_image):
        """Test mirroring flips within the box."""
        surface = Surface(2, 1)
        surface.draw_image(split_image, 0, 0, 2, 1, mirrored=True)

        assert surface.frame.getpixel((0, 0)) == BLUE
        assert surface.frame.getpixel((1, 0)) == RED

    def test_draw_image_skips_empty_box(self, split_image):
        """Test zero-sized boxes draw nothing."""
        surface = Surface(2, 1)
        before = surface.snapshot()
        surface.draw_image(split_image, 0, 0, 0, 1)
        assert list(surface.frame.getdata()) == list(before.getdata())

    def test_transparent_pixels_keep_background(self):
        """Test images are alpha-masked onto the frame."""
        surface = Surface(2, 2)
        surface.draw_background(None)
        surface.draw_image(Image.new("RGBA", (2, 2), (0, 0, 0, 0)), 0, 0, 2, 2)
        assert surface.frame.getpixel((1, 1)) == (*BACKGROUND_COLOR, 255)

    def test_resize(self, surface):
        """Test resizing replaces the frame buffer."""
        surface.resize(320, 200)

        assert surface.size == (320, 200)
        assert surface.frame.size == (320, 200)
        surface.draw_background(None)
        assert surface.frame.getpixel((319, 199)) == (*BACKGROUND_COLOR, 255)

    def test_crosshair(self, surface):
        """Test the default reticle is red at its centre."""
        surface.draw_background(None)
        surface.draw_crosshair(200, 120)

        assert surface.frame.getpixel((200, 120)) == RED
        assert surface.frame.getpixel((230, 120)) == (*BACKGROUND_COLOR, 255)


class TestHudOverlay:
    """Tests for HudOverlay."""

    @pytest.fixture
    def frame(self) -> Image.Image:
        return make_default_background(400, 300)

    def test_frame_is_not_modified(self, frame):
        """Test compose works on a copy."""
        before = frame.copy()
        HudOverlay().compose(frame, GameSnapshot(GamePhase.VICTORY, 10), GameSettings(), 10)
        assert list(frame.getdata()) == list(before.getdata())

    def test_playing_leaves_edges_alone(self, frame):
        """Test only the score panel is drawn while playing."""
        image = HudOverlay().compose(frame, GameSnapshot(GamePhase.PLAYING, 3), GameSettings(), 10)

        assert image.size == frame.size
        assert image.getpixel((300, 200)) == frame.getpixel((300, 200))
        assert image.getpixel((20, 20)) != frame.getpixel((20, 20))

    @pytest.mark.parametrize("phase", [GamePhase.SETTINGS, GamePhase.VICTORY])
    def test_panels_dim_the_frame(self, frame, phase):
        """Test settings and victory darken the game underneath."""
        image = HudOverlay().compose(
            frame,
            GameSnapshot(phase, 10),
            GameSettings(),
            10,
            {"background": 1, "enemy_move_frames": 0},
        )

        corner = image.getpixel((1, 1))
        assert corner[0] < BACKGROUND_COLOR[0]
        assert corner[3] == 255

    def test_accepts_rgb_frames(self):
        """Test non-RGBA frames are converted."""
        frame = Image.new("RGB", (200, 100), (10, 10, 10))
        image = HudOverlay().compose(frame, GameSnapshot(GamePhase.PLAYING, 0), GameSettings(), 10)
        assert image.mode == "RGBA"


class TestTerminalSize:
    """Tests for terminal size helpers."""

    def test_cell_to_pixel_uses_cell_centre(self):
        """Test 1-based cells map to their centre pixel."""
        assert terminal_size.cell_to_pixel(1, 1, (10, 20)) == (5.0, 10.0)
        assert terminal_size.cell_to_pixel(3, 2, (10, 20)) == (25.0, 30.0)

    def test_cell_size_from_winsize(self, monkeypatch):
        """Test pixel sizes reported by the terminal are used."""
        monkeypatch.setattr(terminal_size, "_read_winsize", lambda: (40, 100, 900, 800))
        assert terminal_size.get_cell_size() == (9, 20)
        assert terminal_size.get_terminal_pixel_size() == (900, 780)

    def test_cell_size_fallback(self, monkeypatch):
        """Test the fallback when pixel sizes are unknown."""
        monkeypatch.setattr(terminal_size, "_read_winsize", lambda: (40, 100, 0, 0))
        assert terminal_size.get_cell_size() == terminal_size.FALLBACK_CELL_SIZE


class TestProtocolDetection:
    """Tests for graphics protocol detection."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("TMUX", "KITTY_WINDOW_ID", "TERM_PROGRAM"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("TERM", "dumb")

    @pytest.mark.parametrize(
        "env,expected",
        [
            ({"TERM": "xterm-kitty"}, "kitty"),
            ({"KITTY_WINDOW_ID": "1"}, "kitty"),
            ({"TERM_PROGRAM": "iTerm.app"}, "iterm2"),
            ({"TERM_PROGRAM": "WezTerm"}, "iterm2"),
            ({"TERM": "xterm-256color"}, "sixel"),
            ({}, "none"),
        ],
    )
    def test_detect(self, monkeypatch, env, expected):
        """Test protocol chosen from the environment."""
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        assert detect_graphics_protocol() == expected

    def test_tmux_wrap(self, monkeypatch):
        """Test sequences are wrapped for tmux passthrough."""
        assert tmux_wrap("\033_Gx\033\\") == "\033_Gx\033\\"

        monkeypatch.setenv("TMUX", "/tmp/tmux-0/default,1,0")
        assert tmux_wrap("\033_Gx") == "\033Ptmux;\033\033_Gx\033\\"


class TestTerminalDisplay:
    """Tests for TerminalDisplay."""

    @pytest.fixture(autouse=True)
    def no_tmux(self, monkeypatch):
        monkeypatch.delenv("TMUX", raising=False)

    @pytest.fixture
    def image(self) -> Image.Image:
        return Image.new("RGBA", (4, 3), RED)

    def test_kitty(self, image):
        """Test kitty frames clear once then home the cursor."""
        stream = io.StringIO()
        display = TerminalDisplay(protocol="kitty", stream=stream)

        display.show(image)
        first = stream.getvalue()
        assert first.startswith(CLEAR_SCREEN)
        assert "\033_Ga=T,f=100,q=2,m=0;" in first

        stream.truncate(0)
        stream.seek(0)
        display.show(image)
        assert stream.getvalue().startswith(HOME)
        assert display.frames_shown == 2

    def test_force_clear(self, image):
        """Test force_clear clears the screen on the next frame."""
        stream = io.StringIO()
        display = TerminalDisplay(protocol="kitty", stream=stream)
        display.show(image)
        display.force_clear()

        stream.truncate(0)
        stream.seek(0)
        display.show(image)
        assert stream.getvalue().startswith(CLEAR_SCREEN)

    def test_iterm2(self, image):
        """Test iTerm2 inline image with pixel size."""
        stream = io.StringIO()
        TerminalDisplay(protocol="iterm2", stream=stream).show(image)
        assert "\033]1337;File=inline=1;width=4px;height=3px;preserveAspectRatio=0:" in stream.getvalue()

    def test_fallback_saves_png(self, image, tmp_path):
        """Test frames go to a file when no protocol is available."""
        stream = io.StringIO()
        path = tmp_path / "frame.png"
        display = TerminalDisplay(protocol="none", stream=stream, fallback_path=path)

        display.show(image)
        display.show(image)

        assert path.exists()
        assert stream.getvalue().count(str(path)) == 1

    def test_sixel_without_img2sixel_falls_back(self, image, tmp_path, monkeypatch):
        """Test sixel needs the img2sixel tool."""
        monkeypatch.setattr(display_module.shutil, "which", lambda name: None)
        path = tmp_path / "frame.png"

        TerminalDisplay(protocol="sixel", stream=io.StringIO(), fallback_path=path).show(image)

        assert path.exists()

    def test_cleanup_shows_cursor(self):
        """Test cleanup restores the cursor."""
        stream = io.StringIO()
        TerminalDisplay(protocol="kitty", stream=stream).cleanup()
        assert stream.getvalue().endswith("\033[?25h")
