"""
Block Scanner
=============

Walks two byte streams in lockstep, 16 bytes at a time, and flags every
position where they disagree.

Per block pair:
    1. read up to 16 bytes from each stream (zero padded)
    2. different read sizes  -> everything from the shorter read onward is
       a mismatch (the short side has no data there)
    3. common prefix         -> byte-by-byte compare
    4. any flag set          -> the block is dirty, counts as a hit, and is
       rendered while the display limit allows
    5. stop once either stream has hit end-of-file

The end-of-file check runs *after* a block is processed, so the short (or
empty) final block is still compared. Two files of equal length end with
one empty read pair, which is never dirty, so no phantom block shows up.

Offsets are fixed: an insertion in one file shifts everything after it
and every following block is reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, TextIO, Tuple, Union

from .errors import BdiffIOError
from .renderer import (
    BLOCK_WIDTH,
    RenderConfig,
    render_block,
    render_summary,
)

logger = logging.getLogger(__name__)

PAD_BYTE = b"\x00"


@dataclass(frozen=True)
class BlockDiff:
    """One compared block pair."""
    index: int
    data_a: bytes
    data_b: bytes
    read_a: int
    read_b: int
    mask: Tuple[bool, ...]

    @property
    def dirty(self) -> bool:
        return any(self.mask)

    @property
    def mismatch_count(self) -> int:
        return sum(self.mask)

    @property
    def first_offset(self) -> int:
        """1-based offset of the first byte in the block."""
        return self.index * BLOCK_WIDTH + 1

    @property
    def last_offset(self) -> int:
        return (self.index + 1) * BLOCK_WIDTH


@dataclass
class SessionResult:
    """Counters left behind by a finished comparison."""
    blocks: int = 0
    hits: int = 0
    shown: int = 0
    suppressed: int = 0

    @property
    def identical(self) -> bool:
        return self.hits == 0


def read_block(stream: BinaryIO, width: int = BLOCK_WIDTH) -> Tuple[bytes, int, bool]:
    """
    Read up to ``width`` bytes, the way fread() does.

    Keeps reading until the block is full or the stream returns nothing,
    so short reads from pipes do not split a block.

    Returns:
        (zero padded block, bytes actually read, end-of-file reached)
    """
    data = b""
    eof = False
    while len(data) < width:
        chunk = stream.read(width - len(data))
        if not chunk:
            eof = True
            break
        data += chunk
    return data.ljust(width, PAD_BYTE), len(data), eof


def mismatch_mask(data_a: bytes, read_a: int,
                  data_b: bytes, read_b: int) -> Tuple[bool, ...]:
    """Per-position mismatch flags for one block pair."""
    common = min(read_a, read_b)
    flags: List[bool] = [False] * BLOCK_WIDTH
    if read_a != read_b:
        for i in range(common, BLOCK_WIDTH):
            flags[i] = True
    for i in range(common):
        if data_a[i] != data_b[i]:
            flags[i] = True
    return tuple(flags)


def _stream_name(stream) -> Optional[str]:
    name = getattr(stream, "name", None)
    return None if name is None else str(name)


def scan_blocks(stream_a: BinaryIO, stream_b: BinaryIO) -> Iterator[BlockDiff]:
    """Yield every block pair, dirty or not, until either stream ends."""
    index = 0
    while True:
        try:
            data_a, read_a, eof_a = read_block(stream_a)
        except OSError as exc:
            raise BdiffIOError.from_os_error("read", exc, _stream_name(stream_a)) from exc
        try:
            data_b, read_b, eof_b = read_block(stream_b)
        except OSError as exc:
            raise BdiffIOError.from_os_error("read", exc, _stream_name(stream_b)) from exc

        yield BlockDiff(index, data_a, data_b, read_a, read_b,
                        mismatch_mask(data_a, read_a, data_b, read_b))

        index += 1
        if eof_a or eof_b:
            break


class ComparisonSession:
    """
    Drives a comparison: counts hits, applies the display limit, writes
    rendered blocks and the trailing summary to ``out``.

    The session does not own the streams; ``compare_files`` does.
    """

    def __init__(self, stream_a: BinaryIO, stream_b: BinaryIO,
                 config: Optional[RenderConfig] = None,
                 out: Optional[TextIO] = None):
        self.stream_a = stream_a
        self.stream_b = stream_b
        self.config = config or RenderConfig()
        self.out = out
        self.result = SessionResult()

    def _should_show(self, hits: int) -> bool:
        return self.config.unlimited or hits <= self.config.limit

    def _write(self, text: str):
        if self.out is not None:
            self.out.write(text)

    def run(self) -> SessionResult:
        result = self.result
        config = self.config
        logger.debug("Comparing %s with %s (group=%d, color=%s, limit=%d)",
                     _stream_name(self.stream_a), _stream_name(self.stream_b),
                     config.group, config.color, config.limit)

        for block in scan_blocks(self.stream_a, self.stream_b):
            result.blocks += 1
            if not block.dirty:
                continue
            result.hits += 1
            logger.debug("Block %d (%d-%d): %d mismatched byte(s), read %d/%d",
                         block.index, block.first_offset, block.last_offset,
                         block.mismatch_count, block.read_a, block.read_b)
            if self._should_show(result.hits):
                self._write(render_block(block.index, block.data_a, block.data_b,
                                         block.mask, config))
                result.shown += 1

        if not config.unlimited and result.hits >= config.limit:
            result.suppressed = result.hits - config.limit
            self._write(render_summary(result.suppressed))

        logger.info("%d block(s) scanned, %d differ, %d shown",
                    result.blocks, result.hits, result.shown)
        return result


def _close_all(*streams) -> Optional[OSError]:
    """Close every stream once; return the first close failure."""
    first_error = None
    for stream in streams:
        try:
            stream.close()
        except OSError as exc:
            logger.debug("Failed to close %s: %s", _stream_name(stream), exc)
            if first_error is None:
                first_error = exc
    return first_error


def compare_files(path_a: Union[str, Path], path_b: Union[str, Path],
                  config: Optional[RenderConfig] = None,
                  out: Optional[TextIO] = None) -> SessionResult:
    """
    Compare two files on disk and write the dump to ``out``.

    Raises:
        BdiffIOError: a file could not be opened (nothing is compared) or
            closed (the dump has already been written in full).
    """
    try:
        stream_a = open(path_a, "rb")
    except OSError as exc:
        raise BdiffIOError.from_os_error("open", exc, str(path_a)) from exc
    try:
        stream_b = open(path_b, "rb")
    except OSError as exc:
        stream_a.close()
        raise BdiffIOError.from_os_error("open", exc, str(path_b)) from exc

    try:
        result = ComparisonSession(stream_a, stream_b, config, out).run()
    except BaseException:
        close_error = _close_all(stream_a, stream_b)
        if close_error is not None:
            logger.warning("Close failed after an aborted comparison: %s", close_error)
        raise

    close_error = _close_all(stream_a, stream_b)
    if close_error is not None:
        raise BdiffIOError.from_os_error("close", close_error)
    return result
