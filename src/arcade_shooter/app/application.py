"""Main application entry point."""

from __future__ import annotations

import asyncio
import logging
import random
import signal
import tempfile
from pathlib import Path
from typing import Callable, Optional

from arcade_shooter.assets import AssetLoader, PlaceholderGenerator
from arcade_shooter.config import SettingsStore
from arcade_shooter.engine import GameController, ManualFrameScheduler
from arcade_shooter.renderer import HudOverlay, Surface, TerminalDisplay
from arcade_shooter.renderer.terminal_size import cell_to_pixel, get_cell_size, get_terminal_pixel_size
from arcade_shooter.types import GamePhase, GameResources, GameSnapshot

from .game_loop import GameLoop
from .input import InputEvent, InputKind, TerminalInput

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path(tempfile.gettempdir()) / "arcade_shooter.log"

SPEED_STEP = 1.0
ANIM_SPEED_STEP = 10

# Headless autoplay fires at the first alive enemy every this many frames
AUTOPLAY_SHOT_EVERY = 15


class Application:
    """Main Arcade Shooter application."""

    def __init__(
        self,
        asset_dir: Optional[Path] = None,
        width: int = 0,
        height: int = 0,
        target_fps: int = 60,
        settings_path: Optional[Path] = None,
        enemy_speed: Optional[float] = None,
        anim_speed_ms: Optional[int] = None,
        placeholders: bool = True,
        headless: bool = False,
        seed: Optional[int] = None,
    ):
        """Initialize the application.

        Args:
            asset_dir: Directory holding background, cursor and sequences.
            width: Surface width in pixels (0 = terminal width).
            height: Surface height in pixels (0 = terminal height).
            target_fps: Target frames per second.
            settings_path: Settings file to load and save.
            enemy_speed: Override the saved enemy speed.
            anim_speed_ms: Override the saved animation frame duration.
            placeholders: Generate frames for missing sequences.
            headless: Run without a terminal (autoplay).
            seed: Random seed for reproducible spawns.
        """
        self.asset_dir = Path(asset_dir) if asset_dir is not None else Path("assets")
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.placeholders = placeholders
        self.headless = headless
        self.seed = seed

        self.settings_store = SettingsStore(settings_path)
        self._overrides = {
            key: value
            for key, value in (("enemy_speed", enemy_speed), ("anim_speed_ms", anim_speed_ms))
            if value is not None
        }

        # Components (created in initialize)
        self.resources = GameResources()
        self.surface: Optional[Surface] = None
        self.game_loop: Optional[GameLoop] = None
        self.scheduler: Optional[ManualFrameScheduler] = None
        self.controller: Optional[GameController] = None
        self.display: Optional[TerminalDisplay] = None
        self.hud = HudOverlay()
        self.terminal_input: Optional[TerminalInput] = None

        self._cell_size = (1, 1)
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize all application components."""
        if self._initialized:
            return

        settings = self.settings_store.load()
        if self._overrides:
            settings = self.settings_store.update(**self._overrides)

        width, height = self.width, self.height
        if not self.headless:
            term_w, term_h = get_terminal_pixel_size()
            width = width or term_w
            height = height or term_h
            self._cell_size = get_cell_size()
        self.surface = Surface(width or 800, height or 600)
        self.surface.draw_background(None)

        self.game_loop = GameLoop(target_fps=self.target_fps, on_frame=self.present)
        if self.headless:
            self.scheduler = ManualFrameScheduler()

        self.controller = GameController(
            surface=self.surface,
            scheduler=self.scheduler or self.game_loop,
            resources=self.resources,
            settings=settings,
            rng=random.Random(self.seed),
            clock=self.game_loop.now,
        )
        self.controller.subscribe(self._on_state_change)

        if not self.headless:
            self.display = TerminalDisplay()
            self.terminal_input = TerminalInput()

        self._initialized = True

    async def load_assets(self) -> GameResources:
        """Load images into the shared resources, then fill any gaps."""
        loader = AssetLoader(self.asset_dir)
        await loader.load_async(self.resources)
        if self.placeholders:
            PlaceholderGenerator().fill_missing(self.resources)
        self.present()
        return self.resources

    def present(self) -> None:
        """Show the current frame with the HUD for the current phase."""
        if self.display is None or self.controller is None:
            return
        image = self.hud.compose(
            self.surface.frame,
            self.controller.get_state(),
            self.controller.settings,
            self.controller.config.win_score,
            self.resources.summary(),
        )
        self.display.show(image)

    def _on_state_change(self, state: GameSnapshot) -> None:
        logger.debug("State changed: %s score=%d", state.phase.value, state.score)
        if not state.is_playing:
            self.present()

    def handle_input(self, event: InputEvent) -> None:
        """React to one keyboard or mouse event.

        Args:
            event: Decoded terminal input.
        """
        controller = self.controller
        if event.kind in (InputKind.MOVE, InputKind.CLICK):
            x, y = cell_to_pixel(event.col, event.row, self._cell_size)
            controller.pointer_move(x, y)
            if event.kind == InputKind.CLICK:
                controller.pointer_click(x, y)
            return

        key = event.key
        phase = controller.phase
        if key in ("q", "ctrl-c"):
            self.stop()
        elif key in ("s", "enter") and phase == GamePhase.SETTINGS:
            controller.start(self.game_loop.now())
        elif key in ("r", "escape") and phase != GamePhase.SETTINGS:
            controller.restart()
        elif key in ("-", "=", "[", "]"):
            self._adjust_settings(key)

    def _adjust_settings(self, key: str) -> None:
        """Step a tunable up or down and persist it."""
        current = self.settings_store.settings
        if key == "-":
            settings = self.settings_store.update(enemy_speed=current.enemy_speed - SPEED_STEP)
        elif key == "=":
            settings = self.settings_store.update(enemy_speed=current.enemy_speed + SPEED_STEP)
        elif key == "[":
            settings = self.settings_store.update(anim_speed_ms=current.anim_speed_ms - ANIM_SPEED_STEP)
        else:
            settings = self.settings_store.update(anim_speed_ms=current.anim_speed_ms + ANIM_SPEED_STEP)

        # In-flight enemies keep the speed they spawned with
        self.controller.settings = settings
        logger.info("Settings changed: %s", settings)
        if self.controller.phase != GamePhase.PLAYING:
            self.present()

    def _on_resize(self) -> None:
        width, height = get_terminal_pixel_size()
        self._cell_size = get_cell_size()
        phase = self.controller.phase
        # Victory has no ticks left to repaint, so the last frame is rescaled
        last_frame = self.surface.snapshot() if phase == GamePhase.VICTORY else None
        self.controller.resize(width, height)
        if last_frame is not None:
            self.surface.draw_image(last_frame, 0, 0, width, height)
        elif phase == GamePhase.SETTINGS:
            self.surface.draw_background(None)
        self.display.force_clear()
        if self.controller.phase != GamePhase.PLAYING:
            self.present()

    async def run(self) -> None:
        """Run the interactive game until the player quits."""
        await self.initialize()
        loop = asyncio.get_running_loop()
        self.game_loop.start()

        self.terminal_input.enable()
        self.terminal_input.attach(loop, self.handle_input)
        loop.add_signal_handler(signal.SIGWINCH, self._on_resize)
        load_task = asyncio.create_task(self.load_assets())

        self.present()
        try:
            await self.game_loop.wait_stopped()
        finally:
            loop.remove_signal_handler(signal.SIGWINCH)
            self.terminal_input.detach()
            self.terminal_input.disable()
            self.display.cleanup()
            load_task.cancel()
            try:
                await load_task
            except asyncio.CancelledError:
                pass

    async def run_headless(
        self,
        frames: int,
        output: Optional[Path] = None,
        progress: Optional[Callable[[int], None]] = None,
    ) -> GameSnapshot:
        """Autoplay a game without a terminal.

        Frames fire at exact ``1000 / fps`` millisecond steps. Every few
        frames the first alive enemy is shot through its centre.

        Args:
            frames: Number of frames to simulate.
            output: Where to save the last frame as PNG.
            progress: Called with the frame number after every frame.

        Returns:
            Phase and score at the end.
        """
        self.headless = True
        await self.initialize()
        await self.load_assets()

        step = 1000.0 / self.target_fps
        controller = self.controller
        controller.start(0.0)

        for frame in range(1, frames + 1):
            if controller.phase != GamePhase.PLAYING:
                break
            self.scheduler.run_frame(frame * step)
            if frame % AUTOPLAY_SHOT_EVERY == 0:
                self._autoplay_shot()
            if progress is not None:
                progress(frame)

        if output is not None:
            self.surface.frame.save(output, format="PNG")
            logger.info("Saved last frame to %s", output)
        return controller.get_state()

    def _autoplay_shot(self) -> None:
        for enemy in self.controller.enemies:
            if not enemy.is_alive:
                continue
            x = enemy.x + enemy.width / 2
            y = enemy.y + enemy.height / 2
            if 0 <= x <= self.surface.width:
                self.controller.pointer_move(x, y)
                self.controller.pointer_click(x, y)
                return

    def stop(self) -> None:
        """Stop the application."""
        if self.game_loop is not None:
            self.game_loop.stop()


def main() -> None:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Arcade Shooter - click the enemies before they escape")
    parser.add_argument(
        "--assets",
        type=Path,
        default=Path("assets"),
        help="Directory with background, cursor and frame sequences",
    )
    parser.add_argument("--width", type=int, default=0, help="Surface width in pixels (0 = terminal)")
    parser.add_argument("--height", type=int, default=0, help="Surface height in pixels (0 = terminal)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--speed", type=float, default=None, help="Enemy speed in pixels per frame")
    parser.add_argument("--anim-speed", type=int, default=None, help="Animation frame duration in ms")
    parser.add_argument("--settings-file", type=Path, default=None, help="Settings JSON file")
    parser.add_argument(
        "--no-placeholders",
        action="store_true",
        help="Do not generate frames for missing sequences",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Autoplay without a terminal display",
    )
    parser.add_argument("--frames", type=int, default=3600, help="Frames to simulate when headless")
    parser.add_argument("--output", type=Path, default=None, help="Save the last headless frame here")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-file", type=Path, default=None, help="Log file")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")

    args = parser.parse_args()

    log_kwargs = {}
    if args.log_file is not None or not args.headless:
        # The terminal belongs to the game display
        log_kwargs["filename"] = str(args.log_file or DEFAULT_LOG_FILE)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        **log_kwargs,
    )

    app = Application(
        asset_dir=args.assets,
        width=args.width,
        height=args.height,
        target_fps=args.fps,
        settings_path=args.settings_file,
        enemy_speed=args.speed,
        anim_speed_ms=args.anim_speed,
        placeholders=not args.no_placeholders,
        headless=args.headless,
        seed=args.seed,
    )

    if args.headless:
        state = asyncio.run(app.run_headless(args.frames, args.output))
        print(f"{state.phase.value} score={state.score}")
        return

    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
