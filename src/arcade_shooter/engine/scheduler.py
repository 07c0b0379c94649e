"""Frame scheduling: request a callback for the next display frame."""

from __future__ import annotations

from typing import Callable, Protocol

FrameCallback = Callable[[float], None]


class FrameHandle(Protocol):
    """A pending frame that can be cancelled."""

    def cancel(self) -> None: ...


class FrameScheduler(Protocol):
    """Anything that can run a callback on the next frame.

    Callbacks receive the frame timestamp in milliseconds. A cancelled handle
    must never fire.
    """

    def request_frame(self, callback: FrameCallback) -> FrameHandle: ...


class ScheduledFrame:
    """Handle for a frame queued on a ManualFrameScheduler."""

    def __init__(self, callback: FrameCallback):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualFrameScheduler:
    """Scheduler stepped explicitly by the caller.

    Used for headless runs and tests, where frames should fire at exact
    timestamps rather than on a wall clock.
    """

    def __init__(self):
        self._pending: list[ScheduledFrame] = []
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback) -> ScheduledFrame:
        """Queue a callback for the next run_frame() call."""
        handle = ScheduledFrame(callback)
        self._pending.append(handle)
        return handle

    @property
    def pending(self) -> int:
        """Number of queued, uncancelled frames."""
        return sum(1 for handle in self._pending if not handle.cancelled)

    def run_frame(self, now: float) -> int:
        """Fire every frame queued before this call.

        Frames requested by the callbacks themselves wait for the next call.

        Args:
            now: Timestamp passed to the callbacks, in milliseconds.

        Returns:
            Number of callbacks fired.
        """
        due, self._pending = self._pending, []
        fired = 0
        for handle in due:
            if handle.cancelled:
                continue
            handle.callback(now)
            fired += 1
        self.frames_run += 1
        return fired

    def run_until(self, end: float, step: float, start: float = 0.0) -> float:
        """Fire frames at evenly spaced timestamps.

        Args:
            end: Last timestamp (inclusive).
            step: Milliseconds between frames.
            start: First timestamp.

        Returns:
            The timestamp of the last frame run.
        """
        now = start
        last = start
        while now <= end:
            self.run_frame(now)
            last = now
            now += step
        return last
