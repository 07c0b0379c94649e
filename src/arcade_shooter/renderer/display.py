"""Show frames in the terminal through inline graphics protocols."""

from __future__ import annotations

import base64
import io
import logging
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from .terminal_size import is_inside_tmux

if TYPE_CHECKING:
    from PIL import Image

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
CLEAR_SCREEN = "\033[2J\033[H"
HOME = "\033[H"

KITTY_CHUNK_SIZE = 4096
ITERM2_CHUNK_SIZE = 65536

DEFAULT_FALLBACK_PATH = Path(tempfile.gettempdir()) / "arcade_shooter_frame.png"


def tmux_wrap(sequence: str) -> str:
    """Wrap an escape sequence for tmux passthrough."""
    if not is_inside_tmux():
        return sequence
    escaped = sequence.replace("\033", "\033\033")
    return f"\033Ptmux;{escaped}\033\\"


def detect_graphics_protocol() -> str:
    """Detect which graphics protocol the terminal supports.

    Returns:
        One of ``kitty``, ``iterm2``, ``sixel`` or ``none``.
    """
    term = os.environ.get("TERM", "").lower()
    term_program = os.environ.get("TERM_PROGRAM", "")

    if "kitty" in term or "KITTY_WINDOW_ID" in os.environ:
        return "kitty"
    if term_program in ("iTerm.app", "WezTerm"):
        return "iterm2"
    if is_inside_tmux() or "xterm" in term or "mlterm" in term or "foot" in term:
        return "sixel"
    return "none"


def encode_png(frame: Image.Image) -> bytes:
    """Encode a frame as PNG bytes."""
    buf = io.BytesIO()
    try:
        frame.save(buf, format="PNG")
        return buf.getvalue()
    finally:
        buf.close()


class TerminalDisplay:
    """Writes whole frames to the terminal, top-left aligned."""

    def __init__(
        self,
        protocol: Optional[str] = None,
        stream: Optional[TextIO] = None,
        fallback_path: Path = DEFAULT_FALLBACK_PATH,
    ):
        """Initialize the display.

        Args:
            protocol: Force a protocol instead of detecting one.
            stream: Output stream. Defaults to stdout.
            fallback_path: Where frames go when no protocol is available.
        """
        self.protocol = protocol or detect_graphics_protocol()
        self.stream = stream or sys.stdout
        self.fallback_path = Path(fallback_path)
        self.frames_shown = 0
        self._first_frame = True

    def show(self, frame: Image.Image) -> None:
        """Display one frame.

        Args:
            frame: The image to show.
        """
        if self.protocol == "kitty":
            self._show_kitty(frame)
        elif self.protocol == "iterm2":
            self._show_iterm2(frame)
        elif self.protocol == "sixel" and shutil.which("img2sixel"):
            self._show_sixel(frame)
        else:
            self._save_fallback(frame)
        self.frames_shown += 1

    def _begin_frame(self) -> None:
        if self._first_frame:
            self.stream.write(CLEAR_SCREEN + HIDE_CURSOR)
            self._first_frame = False
        else:
            self.stream.write(HOME)

    def _show_kitty(self, frame: Image.Image) -> None:
        """Display using Kitty graphics protocol."""
        self._begin_frame()
        data = base64.b64encode(encode_png(frame)).decode("ascii")

        for i in range(0, len(data), KITTY_CHUNK_SIZE):
            chunk = data[i:i + KITTY_CHUNK_SIZE]
            more = 1 if i + KITTY_CHUNK_SIZE < len(data) else 0
            if i == 0:
                # a=T transmit and show, q=2 suppress replies on stdin
                self.stream.write(tmux_wrap(f"\033_Ga=T,f=100,q=2,m={more};{chunk}\033\\"))
            else:
                self.stream.write(tmux_wrap(f"\033_Gm={more};{chunk}\033\\"))
        self.stream.flush()

    def _show_iterm2(self, frame: Image.Image) -> None:
        """Display using iTerm2 inline images."""
        self._begin_frame()
        width, height = frame.size
        data = base64.b64encode(encode_png(frame)).decode("ascii")

        if is_inside_tmux():
            start = f"\033]1337;MultipartFile=inline=1;width={width}px;height={height}px;preserveAspectRatio=0\007"
            self.stream.write(tmux_wrap(start))
            for i in range(0, len(data), ITERM2_CHUNK_SIZE):
                self.stream.write(tmux_wrap(f"\033]1337;FilePart={data[i:i + ITERM2_CHUNK_SIZE]}\007"))
            self.stream.write(tmux_wrap("\033]1337;FileEnd\007"))
        else:
            self.stream.write(
                f"\033]1337;File=inline=1;width={width}px;height={height}px;preserveAspectRatio=0:{data}\007"
            )
        self.stream.flush()

    def _show_sixel(self, frame: Image.Image) -> None:
        """Display using Sixel graphics via img2sixel."""
        self._begin_frame()
        self.stream.flush()

        result = subprocess.run(
            ["img2sixel", "-"],
            input=encode_png(frame),
            capture_output=True,
        )
        if result.returncode != 0:
            logger.error("img2sixel failed: %s", result.stderr.decode(errors="replace").strip())
            return
        self.stream.buffer.write(result.stdout)
        self.stream.flush()

    def _save_fallback(self, frame: Image.Image) -> None:
        frame.save(self.fallback_path, format="PNG")
        if self._first_frame:
            self.stream.write(f"{CLEAR_SCREEN}[No inline graphics; frames saved to {self.fallback_path}]\n")
            self.stream.flush()
            self._first_frame = False

    def force_clear(self) -> None:
        """Clear the whole screen before the next frame."""
        self._first_frame = True

    def cleanup(self) -> None:
        """Restore terminal state."""
        self.stream.write(CLEAR_SCREEN + SHOW_CURSOR)
        self.stream.flush()
