"""Terminal size detection in cells and pixels."""

from __future__ import annotations

import fcntl
import os
import shutil
import struct
import sys
import termios

# Used when the terminal does not report pixel sizes
FALLBACK_CELL_SIZE = (10, 20)


def is_inside_tmux() -> bool:
    """Check if we're running inside tmux."""
    return "TMUX" in os.environ


def _read_winsize() -> tuple[int, int, int, int]:
    """Read (rows, cols, xpixel, ypixel) from the controlling terminal.

    Returns zeros for anything the terminal does not report.
    """
    try:
        result = fcntl.ioctl(sys.stdout.fileno(), termios.TIOCGWINSZ, b"\x00" * 8)
        return struct.unpack("HHHH", result)
    except (OSError, ValueError):
        return 0, 0, 0, 0


def get_terminal_cells() -> tuple[int, int]:
    """Get the terminal size as (columns, rows)."""
    rows, cols, _, _ = _read_winsize()
    if cols > 0 and rows > 0:
        return cols, rows
    size = shutil.get_terminal_size()
    return size.columns, size.lines


def get_cell_size() -> tuple[int, int]:
    """Get one character cell's size in pixels as (width, height)."""
    rows, cols, xpixel, ypixel = _read_winsize()
    if cols > 0 and rows > 0 and xpixel > 0 and ypixel > 0:
        return max(1, xpixel // cols), max(1, ypixel // rows)
    return FALLBACK_CELL_SIZE


def get_terminal_pixel_size() -> tuple[int, int]:
    """Get the terminal size in pixels as (width, height).

    One row is left free so the image does not scroll the terminal.
    """
    cols, rows = get_terminal_cells()
    cell_w, cell_h = get_cell_size()
    return cols * cell_w, max(1, rows - 1) * cell_h


def cell_to_pixel(col: int, row: int, cell_size: tuple[int, int]) -> tuple[float, float]:
    """Convert a 1-based terminal cell to the pixel at its centre.

    Args:
        col: Column, starting at 1.
        row: Row, starting at 1.
        cell_size: (width, height) of one cell in pixels.

    Returns:
        (x, y) in surface pixels.
    """
    cell_w, cell_h = cell_size
    return (col - 1 + 0.5) * cell_w, (row - 1 + 0.5) * cell_h
