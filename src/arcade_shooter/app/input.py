"""Keyboard and mouse input from a raw-mode terminal."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import sys
import termios
import tty
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Any-motion mouse tracking with SGR extended coordinates
ENABLE_MOUSE = "\033[?1003h\033[?1006h"
DISABLE_MOUSE = "\033[?1006l\033[?1003l"

# ESC [ < button ; col ; row (M = press/motion, m = release)
_SGR_MOUSE = re.compile(rb"\x1b\[<(\d+);(\d+);(\d+)([Mm])")
_CSI = re.compile(rb"\x1b\[[0-9;?]*[ -/]*[@-~]")

MOTION_FLAG = 32
BUTTON_MASK = 3
LEFT_BUTTON = 0

# Longest partial escape sequence kept between reads
MAX_PENDING = 64

KEY_NAMES = {
    b"\r": "enter",
    b"\n": "enter",
    b"\x1b": "escape",
    b"\x03": "ctrl-c",
}


class InputKind(Enum):
    """Kinds of input the game reacts to."""

    MOVE = "move"
    CLICK = "click"
    KEY = "key"


@dataclass(frozen=True)
class InputEvent:
    """One decoded input event.

    Mouse coordinates are 1-based terminal cells.
    """

    kind: InputKind
    col: int = 0
    row: int = 0
    key: str = ""


def parse_input(data: bytes) -> tuple[list[InputEvent], bytes]:
    """Decode raw terminal bytes into input events.

    Args:
        data: Bytes read from stdin, possibly ending mid-sequence.

    Returns:
        The decoded events and any incomplete trailing bytes to prepend to
        the next read.
    """
    events: list[InputEvent] = []
    i = 0
    while i < len(data):
        if data[i:i + 1] == b"\x1b":
            mouse = _SGR_MOUSE.match(data, i)
            if mouse is not None:
                event = _mouse_event(mouse)
                if event is not None:
                    events.append(event)
                i = mouse.end()
                continue

            csi = _CSI.match(data, i)
            if csi is not None:
                # Other control sequences (arrows, focus) are ignored
                i = csi.end()
                continue

            if data[i + 1:i + 2] == b"[":
                # Sequence cut off by the read; wait for the rest
                return events, data[i:]

        char = data[i:i + 1]
        events.append(InputEvent(InputKind.KEY, key=KEY_NAMES.get(char, char.decode("latin-1").lower())))
        i += 1

    return events, b""


def _mouse_event(match: re.Match) -> Optional[InputEvent]:
    button = int(match.group(1))
    col, row = int(match.group(2)), int(match.group(3))
    pressed = match.group(4) == b"M"

    if button & MOTION_FLAG:
        return InputEvent(InputKind.MOVE, col=col, row=row)
    if pressed and button & BUTTON_MASK == LEFT_BUTTON:
        return InputEvent(InputKind.CLICK, col=col, row=row)
    return None


class TerminalInput:
    """Puts the terminal in cbreak mode with mouse reporting and feeds events."""

    def __init__(self, fd: Optional[int] = None):
        """Initialize the input reader.

        Args:
            fd: File descriptor to read from. Defaults to stdin.
        """
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved_attrs: Optional[list] = None
        self._pending = b""
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handler: Optional[Callable[[InputEvent], None]] = None

    def enable(self) -> None:
        """Switch to cbreak mode and turn on mouse reporting."""
        if os.isatty(self.fd):
            self._saved_attrs = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        sys.stdout.write(ENABLE_MOUSE)
        sys.stdout.flush()

    def disable(self) -> None:
        """Restore the terminal."""
        sys.stdout.write(DISABLE_MOUSE)
        sys.stdout.flush()
        if self._saved_attrs is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def attach(self, loop: asyncio.AbstractEventLoop, handler: Callable[[InputEvent], None]) -> None:
        """Deliver events to a handler from the event loop.

        Args:
            loop: Running event loop.
            handler: Called once per event, between frames.
        """
        self._loop = loop
        self._handler = handler
        loop.add_reader(self.fd, self._on_readable)

    def detach(self) -> None:
        """Stop delivering events."""
        if self._loop is not None:
            self._loop.remove_reader(self.fd)
            self._loop = None

    def _on_readable(self) -> None:
        try:
            data = os.read(self.fd, 4096)
        except BlockingIOError:
            return
        if not data:
            logger.info("Input closed, no longer reading")
            self.detach()
            return
        events, self._pending = parse_input(self._pending + data)
        if len(self._pending) > MAX_PENDING:
            self._pending = b""
        for event in events:
            if self._handler is not None:
                self._handler(event)
