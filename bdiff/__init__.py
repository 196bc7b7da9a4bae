"""
bdiff - byte-for-byte binary file comparison
============================================
Compares two files in fixed 16-byte blocks and prints each differing block
as a side-by-side hex/ASCII dump, optionally highlighting mismatched bytes.

Architecture:
    ┌──────────┐    ┌─────────────┐    ┌─────────────┐    ┌────────┐
    │ file1    │───>│   Scanner   │───>│  Renderer   │───>│ stdout │
    │ file2    │    │ (BlockDiff) │    │ (hex/ASCII) │    │        │
    └──────────┘    └─────────────┘    └─────────────┘    └────────┘

    - scanner.py:  lockstep 16-byte reads, mismatch masks, hit/limit
                   bookkeeping, file open/close lifecycle
    - renderer.py: pure string formatting of one block pair
    - cli.py:      argparse front end and exit codes

Blocks are compared at fixed offsets only: an inserted byte shifts every
following block rather than being resynchronized.
"""

__version__ = "1.0.0"

import io

from .errors import BdiffError, BdiffIOError
from .renderer import (
    BLOCK_WIDTH,
    DEFAULT_GROUP,
    DEFAULT_LIMIT,
    RenderConfig,
    ascii_char,
    block_header,
    hex_octets,
    render_block,
    render_line,
)
from .scanner import (
    BlockDiff,
    ComparisonSession,
    SessionResult,
    compare_files,
    mismatch_mask,
    read_block,
    scan_blocks,
)


def compare_bytes(data_a: bytes, data_b: bytes, *, group: int = DEFAULT_GROUP,
                  color: bool = False, limit: int = DEFAULT_LIMIT) -> str:
    """Compare two in-memory byte strings and return the dump text.

    Same output as the command line for files holding ``data_a`` and
    ``data_b``.
    """
    out = io.StringIO()
    config = RenderConfig(group=group, color=color, limit=limit)
    ComparisonSession(io.BytesIO(data_a), io.BytesIO(data_b), config, out).run()
    return out.getvalue()
