"""
RIFF subchunk scanning

Two strategies are provided. ``stride_scan`` looks for a tag at every
4-byte step, which matches files whose subchunks are all multiples of four
bytes long. ``scan_chunks`` walks the chunk headers using each declared
length plus RIFF word padding.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

from wavpeek.wave.bytes_util import read_decimal, read_text

CHUNK_HEADER_SIZE = 8
RIFF_HEADER_SIZE = 12


@dataclass(frozen=True)
class ChunkInfo:
    """Location of one subchunk within a buffer"""

    tag: str
    offset: int  # first payload byte
    length: int  # declared payload length

    @property
    def header_offset(self) -> int:
        return self.offset - CHUNK_HEADER_SIZE

    @property
    def end(self) -> int:
        """Offset just past the payload, including the pad byte"""
        return self.offset + self.length + (self.length % 2)


def stride_scan(
    buffer,
    tag: str,
    start: int,
    stop: int,
    step: int = 4
) -> List[ChunkInfo]:
    """
    Find every position in [start, stop] where ``tag`` begins

    Positions whose tag and length fields would run past the end of the
    buffer are skipped.

    Args:
        buffer: Bytes-like RIFF buffer
        tag: 4-character chunk tag
        start: First position to test
        stop: Last position to test (inclusive)
        step: Distance between tested positions

    Returns:
        Matches in buffer order
    """
    matches = []
    last = min(stop, len(buffer) - CHUNK_HEADER_SIZE)

    for position in range(start, last + 1, step):
        if read_text(buffer, position, 4) == tag:
            length = read_decimal(buffer, position + 4, 4)
            matches.append(ChunkInfo(tag, position + CHUNK_HEADER_SIZE, length))

    return matches


def scan_chunks(
    buffer,
    start: int = RIFF_HEADER_SIZE,
    end: Optional[int] = None,
    policy: str = 'last'
) -> Dict[str, ChunkInfo]:
    """
    Walk subchunk headers and map each tag to its location

    The walk stops when a header no longer fits in the buffer. A payload
    that runs past the end is still recorded with its declared length.

    Args:
        buffer: Bytes-like RIFF buffer
        start: Offset of the first subchunk header
        end: Offset to stop at (default: end of buffer)
        policy: 'last' or 'first', which duplicate tag is kept

    Returns:
        Dictionary mapping tag to ChunkInfo
    """
    if policy not in ('last', 'first'):
        raise ValueError(f"Unknown match policy: {policy}")

    limit = len(buffer) if end is None else min(end, len(buffer))
    table: Dict[str, ChunkInfo] = {}
    position = start

    while position + CHUNK_HEADER_SIZE <= limit:
        tag = read_text(buffer, position, 4)
        length = read_decimal(buffer, position + 4, 4)
        chunk = ChunkInfo(tag, position + CHUNK_HEADER_SIZE, length)

        if policy == 'last' or tag not in table:
            table[tag] = chunk

        position = chunk.end

    return table
