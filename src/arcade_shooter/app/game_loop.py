"""Game loop: schedules frames on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from arcade_shooter.engine.scheduler import FrameCallback

logger = logging.getLogger(__name__)


class GameLoop:
    """Frame scheduler backed by ``loop.call_later``.

    Each requested frame runs once, roughly ``1 / target_fps`` seconds after
    it was requested, and receives the loop clock in milliseconds. Cancelling
    the returned handle guarantees the frame never runs.
    """

    def __init__(
        self,
        target_fps: int = 60,
        on_frame: Optional[Callable[[], None]] = None,
    ):
        """Initialize the game loop.

        Args:
            target_fps: Target frames per second.
            on_frame: Called after every frame, e.g. to present it.
        """
        self.target_fps = max(1, target_fps)
        self.target_frame_time = 1.0 / self.target_fps
        self.on_frame = on_frame

        self._origin = time.perf_counter()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stopped: Optional[asyncio.Event] = None
        self._running = False

        self._frame_count = 0
        self._fps = 0.0
        self._fps_window_start = self._origin

    def now(self) -> float:
        """Milliseconds since the loop was created."""
        return (time.perf_counter() - self._origin) * 1000.0

    def start(self) -> None:
        """Bind to the running event loop."""
        self._loop = asyncio.get_running_loop()
        self._stopped = asyncio.Event()
        self._running = True

    def stop(self) -> None:
        """Stop the game loop."""
        self._running = False
        if self._stopped is not None:
            self._stopped.set()

    async def wait_stopped(self) -> None:
        """Wait until stop() is called."""
        if self._stopped is None:
            self.start()
        await self._stopped.wait()

    @property
    def is_running(self) -> bool:
        """Check if loop is running.

        Returns:
            True if running.
        """
        return self._running

    @property
    def fps(self) -> float:
        """Get current FPS.

        Returns:
            Frames per second measured over the last second.
        """
        return self._fps

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        """Run a callback on the next frame.

        Args:
            callback: Receives the frame time in milliseconds.

        Returns:
            A handle whose cancel() drops the frame.
        """
        if self._loop is None:
            self.start()
        return self._loop.call_later(self.target_frame_time, self._run_frame, callback)

    def _run_frame(self, callback: FrameCallback) -> None:
        if not self._running:
            return

        try:
            callback(self.now())
            if self.on_frame is not None:
                self.on_frame()
        except Exception:
            logger.exception("Frame callback failed")

        # Track FPS
        self._frame_count += 1
        elapsed = time.perf_counter() - self._fps_window_start
        if elapsed >= 1.0:
            self._fps = self._frame_count / elapsed
            self._frame_count = 0
            self._fps_window_start = time.perf_counter()
