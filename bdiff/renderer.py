"""
Block Renderer
==============

Formats one pair of 16-byte blocks as a dual hex/ASCII dump:

    1-16:
    < 4142 4300 0000 0000 0000 0000 0000 0000  ABC.............
    > 4158 4300 0000 0000 0000 0000 0000 0000  AXC.............

The first line is the 1-based byte range of the block, the ``<`` line is
the first file and the ``>`` line the second. With color enabled every
mismatched position (hex octet and ASCII column alike) is drawn in bold
red.

Everything here is pure: functions return strings and never touch a
stream, so the scanner decides where the text goes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

BLOCK_WIDTH = 16
DEFAULT_GROUP = 2
DEFAULT_LIMIT = 4

# ANSI SGR sequences
COLOR_MISMATCH = "\x1b[1;31m"
COLOR_RESET = "\x1b[0m"

MARKER_SOURCE = "<"
MARKER_TARGET = ">"


@dataclass(frozen=True)
class RenderConfig:
    """Output settings, fixed for a whole comparison session.

    Attributes:
        group: Hex octets per cluster before a separator space. 0 disables
            separators entirely.
        color: Highlight mismatched bytes with ANSI escapes.
        limit: Dirty blocks shown before output is truncated with a
            summary line. ``<= 0`` shows everything.
    """
    group: int = DEFAULT_GROUP
    color: bool = False
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if self.group < 0:
            raise ValueError(f"group must be non-negative, got {self.group}")

    @property
    def unlimited(self) -> bool:
        return self.limit <= 0


def ascii_char(byte: int) -> str:
    """Printable ASCII (32..126) as itself, anything else as '.'."""
    if 32 <= byte < 127:
        return chr(byte)
    return "."


def _separator_after(position: int, group: int) -> bool:
    # group 0 never triggers a break
    if group <= 0 or position >= BLOCK_WIDTH - 1:
        return False
    return (position + 1) % group == 0


def hex_octets(data: bytes, group: int = DEFAULT_GROUP) -> str:
    """Plain grouped hex for a block, e.g. ``4142 4300 ...`` for group 2."""
    parts = []
    for i, byte in enumerate(data[:BLOCK_WIDTH]):
        parts.append(f"{byte:02x}")
        if _separator_after(i, group):
            parts.append(" ")
    return "".join(parts)


def block_header(index: int) -> str:
    """1-based inclusive byte range covered by block ``index``."""
    return f"{index * BLOCK_WIDTH + 1}-{(index + 1) * BLOCK_WIDTH}:"


def render_line(data: bytes, mask: Sequence[bool], config: RenderConfig,
                marker: str = MARKER_SOURCE) -> str:
    """Render one side of a block, without the trailing newline."""
    if len(data) != BLOCK_WIDTH or len(mask) != BLOCK_WIDTH:
        raise ValueError(
            f"expected {BLOCK_WIDTH} bytes and flags, "
            f"got {len(data)} bytes and {len(mask)} flags")

    def paint(position: int) -> str:
        if not config.color:
            return ""
        return COLOR_MISMATCH if mask[position] else COLOR_RESET

    out = [marker, " "]
    for i, byte in enumerate(data):
        out.append(paint(i))
        out.append(f"{byte:02x}")
        if _separator_after(i, config.group):
            out.append(" ")
    out.append("  ")
    for i, byte in enumerate(data):
        out.append(paint(i))
        out.append(ascii_char(byte))
    if config.color:
        out.append(COLOR_RESET)
    return "".join(out)


def render_block(index: int, data_a: bytes, data_b: bytes,
                 mask: Sequence[bool], config: RenderConfig) -> str:
    """Header, source line and target line, each terminated by a newline."""
    return "\n".join((
        block_header(index),
        render_line(data_a, mask, config, MARKER_SOURCE),
        render_line(data_b, mask, config, MARKER_TARGET),
    )) + "\n"


def render_summary(suppressed: int) -> str:
    return f"... and {suppressed} more.\n"
