"""Tests for the application layer: input, game loop and wiring."""

from __future__ import annotations

import asyncio
import json
import os
from unittest.mock import MagicMock

import pytest

from arcade_shooter.app import Application, GameLoop, InputEvent, InputKind, TerminalInput, parse_input
from arcade_shooter.app import application as application_module
from arcade_shooter.engine import Enemy
from arcade_shooter.renderer.surface import BACKGROUND_COLOR
from arcade_shooter.types import GamePhase, LEFT_TO_RIGHT


def key(name: str) -> InputEvent:
    return InputEvent(InputKind.KEY, key=name)


class TestParseInput:
    """Tests for parse_input."""

    def test_plain_keys(self):
        """Test characters become lowercase key events."""
        events, leftover = parse_input(b"sQ")
        assert [e.key for e in events] == ["s", "q"]
        assert leftover == b""

    @pytest.mark.parametrize(
        "data,name",
        [
            (b"\r", "enter"),
            (b"\n", "enter"),
            (b"\x03", "ctrl-c"),
            (b"\x1b", "escape"),
        ],
    )
    def test_named_keys(self, data, name):
        """Test control characters get readable names."""
        events, _ = parse_input(data)
        assert events == [key(name)]

    def test_mouse_motion(self):
        """Test motion reports become move events."""
        events, _ = parse_input(b"\x1b[<35;10;5M")
        assert events == [InputEvent(InputKind.MOVE, col=10, row=5)]

    def test_left_press_is_click(self):
        """Test a left button press becomes a click; its release is ignored."""
        events, _ = parse_input(b"\x1b[<0;3;4M\x1b[<0;3;4m")
        assert events == [InputEvent(InputKind.CLICK, col=3, row=4)]

    def test_other_buttons_ignored(self):
        """Test right clicks do nothing."""
        events, _ = parse_input(b"\x1b[<2;3;4M")
        assert events == []

    def test_other_sequences_ignored(self):
        """Test arrow keys are skipped without producing events."""
        events, leftover = parse_input(b"\x1b[Ar")
        assert events == [key("r")]
        assert leftover == b""

    def test_split_sequence_is_kept(self):
        """Test a sequence cut by a read is returned for the next read."""
        events, leftover = parse_input(b"s\x1b[<0;3")
        assert events == [key("s")]
        assert leftover == b"\x1b[<0;3"

        events, leftover = parse_input(leftover + b";4M")
        assert events == [InputEvent(InputKind.CLICK, col=3, row=4)]
        assert leftover == b""


class TestTerminalInput:
    """Tests for TerminalInput reading."""

    @pytest.fixture
    def pipe(self):
        read_fd, write_fd = os.pipe()
        yield read_fd, write_fd
        for fd in (read_fd, write_fd):
            try:
                os.close(fd)
            except OSError:
                pass

    def test_events_reach_handler(self, pipe):
        """Test bytes read from the fd are parsed and delivered."""
        read_fd, write_fd = pipe
        loop = MagicMock()
        handler = MagicMock()
        terminal_input = TerminalInput(fd=read_fd)
        terminal_input.attach(loop, handler)

        os.write(write_fd, b"s")
        terminal_input._on_readable()

        loop.add_reader.assert_called_once_with(read_fd, terminal_input._on_readable)
        handler.assert_called_once_with(key("s"))

    def test_end_of_input_detaches(self, pipe):
        """Test a closed input stops being watched instead of spinning."""
        read_fd, write_fd = pipe
        loop = MagicMock()
        handler = MagicMock()
        terminal_input = TerminalInput(fd=read_fd)
        terminal_input.attach(loop, handler)

        os.close(write_fd)
        terminal_input._on_readable()

        loop.remove_reader.assert_called_once_with(read_fd)
        handler.assert_not_called()


@pytest.mark.asyncio
class TestGameLoop:
    """Tests for the asyncio frame scheduler."""

    async def test_request_frame_runs_once(self):
        """Test a requested frame fires with a millisecond timestamp."""
        loop = GameLoop(target_fps=500)
        loop.start()
        times = []

        loop.request_frame(times.append)
        await asyncio.sleep(0.05)

        assert len(times) == 1
        assert times[0] > 0

    async def test_cancelled_frame_never_runs(self):
        """Test cancel drops the frame."""
        loop = GameLoop(target_fps=500)
        loop.start()
        callback = MagicMock()

        loop.request_frame(callback).cancel()
        await asyncio.sleep(0.05)

        callback.assert_not_called()

    async def test_stopped_loop_runs_nothing(self):
        """Test frames queued before stop are dropped."""
        loop = GameLoop(target_fps=500)
        loop.start()
        callback = MagicMock()

        loop.request_frame(callback)
        loop.stop()
        await asyncio.sleep(0.05)

        callback.assert_not_called()
        assert not loop.is_running

    async def test_on_frame_called_after_callback(self):
        """Test the presenter runs after each frame."""
        order = []
        loop = GameLoop(target_fps=500, on_frame=lambda: order.append("present"))
        loop.start()

        loop.request_frame(lambda now: order.append("tick"))
        await asyncio.sleep(0.05)

        assert order == ["tick", "present"]

    async def test_failing_callback_is_logged(self, caplog):
        """Test an exception in a frame does not escape the loop."""
        loop = GameLoop(target_fps=500)
        loop.start()

        loop.request_frame(MagicMock(side_effect=RuntimeError("bad frame")))
        await asyncio.sleep(0.05)

        assert "Frame callback failed" in caplog.text

    async def test_wait_stopped(self):
        """Test wait_stopped returns after stop."""
        loop = GameLoop()
        loop.start()
        asyncio.get_running_loop().call_later(0.01, loop.stop)

        await asyncio.wait_for(loop.wait_stopped(), timeout=1.0)


@pytest.mark.asyncio
class TestApplication:
    """Tests for Application wiring in headless mode."""

    @pytest.fixture
    def settings_path(self, tmp_path):
        return tmp_path / "settings.json"

    @pytest.fixture
    def app(self, tmp_path, settings_path) -> Application:
        return Application(
            asset_dir=tmp_path / "assets",
            settings_path=settings_path,
            headless=True,
            seed=1,
        )

    async def test_initialize_headless(self, app):
        """Test headless mode uses a manual scheduler and no terminal."""
        await app.initialize()

        assert app.surface.size == (800, 600)
        assert app.controller.scheduler is app.scheduler
        assert app.display is None
        assert app.terminal_input is None
        assert app.controller.phase == GamePhase.SETTINGS

    async def test_overrides_are_saved(self, tmp_path, settings_path):
        """Test command-line overrides become the saved settings."""
        app = Application(
            asset_dir=tmp_path,
            settings_path=settings_path,
            enemy_speed=6,
            headless=True,
        )
        await app.initialize()

        assert app.controller.settings.enemy_speed == 6.0
        assert json.loads(settings_path.read_text())["enemy_speed"] == 6.0

    async def test_start_and_restart_keys(self, app):
        """Test s starts a game and r goes back to settings."""
        await app.initialize()

        app.handle_input(key("r"))
        assert app.controller.phase == GamePhase.SETTINGS

        app.handle_input(key("s"))
        assert app.controller.phase == GamePhase.PLAYING

        app.handle_input(key("enter"))
        assert app.controller.tick_count == 1

        app.handle_input(key("r"))
        assert app.controller.phase == GamePhase.SETTINGS

    async def test_settings_keys(self, app, settings_path):
        """Test speed keys step, clamp and persist the settings."""
        await app.initialize()

        app.handle_input(key("="))
        app.handle_input(key("["))
        assert app.controller.settings.enemy_speed == 4.0
        assert app.controller.settings.anim_speed_ms == 140

        for _ in range(10):
            app.handle_input(key("-"))
        assert app.controller.settings.enemy_speed == pytest.approx(0.1)

        saved = json.loads(settings_path.read_text())
        assert saved["anim_speed_ms"] == 140

    async def test_click_converts_cells(self, app):
        """Test mouse cells are mapped to pixels before shooting."""
        await app.initialize()
        app.handle_input(key("s"))
        enemy = Enemy(100, 100, LEFT_TO_RIGHT)
        app.controller.enemies.append(enemy)

        app.handle_input(InputEvent(InputKind.MOVE, col=50, row=60))
        assert (app.controller.pointer.x, app.controller.pointer.y) == (49.5, 59.5)

        app.handle_input(InputEvent(InputKind.CLICK, col=141, row=141))
        assert app.controller.score == 1
        assert not enemy.is_alive

    async def test_quit_key_stops(self, app):
        """Test q stops the game loop."""
        await app.initialize()
        app.game_loop.start()

        app.handle_input(key("q"))

        assert not app.game_loop.is_running

    async def test_load_assets_fills_placeholders(self, app):
        """Test missing sequences get generated frames."""
        await app.initialize()
        resources = await app.load_assets()

        summary = resources.summary()
        assert summary["enemy_move_frames"] > 0
        assert summary["fire_effect_frames"] > 0
        assert summary["background"] == 0

    async def test_run_headless_reaches_victory(self, app, tmp_path):
        """Test autoplay wins a full game and saves the last frame."""
        output = tmp_path / "last.png"

        state = await app.run_headless(3600, output)

        assert state.phase == GamePhase.VICTORY
        assert state.score == 10
        assert output.exists()

    async def test_run_headless_stops_early(self, app):
        """Test too few frames leaves the game running."""
        state = await app.run_headless(60)

        assert state.phase == GamePhase.PLAYING
        assert state.score == 0

    async def test_run_headless_reports_progress(self, app):
        """Test the progress hook sees every frame."""
        seen = []

        await app.run_headless(30, progress=seen.append)

        assert seen == list(range(1, 31))

    async def test_resize_keeps_victory_frame(self, app, monkeypatch):
        """Test resizing after a win rescales the last frame instead of blanking it."""
        await app.initialize()
        app.handle_input(key("s"))
        for _ in range(10):
            app.controller.enemies.append(Enemy(100, 100, LEFT_TO_RIGHT))
        for _ in range(10):
            app.handle_input(InputEvent(InputKind.CLICK, col=141, row=141))
        assert app.controller.phase == GamePhase.VICTORY

        app.surface.draw_background(None)
        app.display = MagicMock()
        monkeypatch.setattr(application_module, "get_terminal_pixel_size", lambda: (400, 300))
        monkeypatch.setattr(application_module, "get_cell_size", lambda: (8, 16))

        app._on_resize()

        assert app.surface.size == (400, 300)
        assert app.surface.frame.getpixel((20, 20)) == (*BACKGROUND_COLOR, 255)
        app.display.force_clear.assert_called_once()
        app.display.show.assert_called_once()
