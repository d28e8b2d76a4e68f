"""
WAVE header and sample parser

Reads the RIFF header and format fields of a WAVE buffer, locates the data
subchunk and exposes the PCM samples as a read-only numpy view.

Only uncompressed 8-bit and 16-bit PCM samples are decoded. The parser does
not auto-correct:
 - incorrect block alignment values
 - incorrect byte rate values
 - missing word alignment padding
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Optional, Any

import numpy as np

from wavpeek.utils.config import WavpeekConfig, SCAN_MODES, MATCH_POLICIES
from wavpeek.utils.logger import get_logger
from wavpeek.wave.bytes_util import read_decimal, read_text
from wavpeek.wave.chunks import ChunkInfo, scan_chunks, stride_scan, CHUNK_HEADER_SIZE
from wavpeek.wave.encoding import SampleEncoding

logger = get_logger()

# Error tags
NOT_SUPPORTED_FORMAT = 'NOT_SUPPORTED_FORMAT'
DATA_NOT_FOUND = 'DATA_NOT_FOUND'
UNSUPPORTED_ENCODING = 'UNSUPPORTED_ENCODING'
READ_FAILED = 'READ_FAILED'

HEADER_SIZE = 36
DATA_SCAN_START = 36
FMT_PAYLOAD_SIZE = 16


class ReadyState(IntEnum):
    """Lifecycle of a WaveFile"""

    EMPTY = 0  # No data has been loaded yet
    LOADING = 1  # Data is currently being loaded
    DONE = 2  # The entire read request has been completed
    UNSUPPORTED_FORMAT = 3  # File format not recognized


class UnsupportedFormatError(ValueError):
    """Raised when a buffer is not a supported WAVE file"""

    def __init__(self, tag: str, message: Optional[str] = None):
        super().__init__(message or tag)
        self.tag = tag


@dataclass
class WaveFile:
    """Parsed WAVE header fields and sample view"""

    # RIFF header
    chunk_id: Optional[str] = None  # must be RIFF
    chunk_size: Optional[int] = None
    format: Optional[str] = None  # must be WAVE

    # fmt fields
    audio_format: Optional[int] = None
    num_channels: Optional[int] = None
    sample_rate: Optional[int] = None
    byte_rate: Optional[int] = None
    block_align: Optional[int] = None  # == num_channels * bits_per_sample / 8
    bits_per_sample: Optional[int] = None

    # data chunk
    data_offset: int = -1
    data_length: int = -1
    samples: Optional[np.ndarray] = field(default=None, repr=False, compare=False)
    chunks: Dict[str, ChunkInfo] = field(default_factory=dict, repr=False)

    state: ReadyState = ReadyState.EMPTY
    error: Optional[str] = None

    @property
    def encoding(self) -> Optional[SampleEncoding]:
        return SampleEncoding.from_bits(self.bits_per_sample)

    @property
    def frame_count(self) -> int:
        """Number of sample frames declared by the data chunk"""
        if not self.block_align or self.data_length < 0:
            return 0
        return self.data_length // self.block_align

    @property
    def duration(self) -> float:
        """Declared duration in seconds"""
        if not self.sample_rate:
            return 0.0
        return self.frame_count / self.sample_rate

    def slice(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        """
        Get a view over a range of samples

        Args:
            start: First sample index
            stop: Sample index to stop before (None for end)

        Returns:
            Read-only numpy view sharing the parsed buffer
        """
        if self.samples is None:
            raise ValueError("No samples available")
        return self.samples[start:stop]

    def raise_for_state(self) -> 'WaveFile':
        """Raise UnsupportedFormatError if parsing failed"""
        if self.state == ReadyState.UNSUPPORTED_FORMAT:
            raise UnsupportedFormatError(self.error or NOT_SUPPORTED_FORMAT)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Header summary without the sample data"""
        return {
            'state': self.state.name,
            'error': self.error,
            'chunk_id': self.chunk_id,
            'chunk_size': self.chunk_size,
            'format': self.format,
            'audio_format': self.audio_format,
            'num_channels': self.num_channels,
            'sample_rate': self.sample_rate,
            'byte_rate': self.byte_rate,
            'block_align': self.block_align,
            'bits_per_sample': self.bits_per_sample,
            'data_offset': self.data_offset,
            'data_length': self.data_length,
            'sample_count': 0 if self.samples is None else int(self.samples.size),
            'duration': round(self.duration, 6),
        }


class WaveParser:
    """Decodes a byte buffer into a WaveFile"""

    def __init__(self, config: Optional[WavpeekConfig] = None):
        """
        Initialize parser

        Args:
            config: Parser settings (defaults reproduce the stride scan
                with last-match-wins and lenient bit depths)
        """
        self.config = config or WavpeekConfig()

        if self.config.scan_mode not in SCAN_MODES:
            raise ValueError(f"Unknown scan mode: {self.config.scan_mode}")
        if self.config.match_policy not in MATCH_POLICIES:
            raise ValueError(f"Unknown match policy: {self.config.match_policy}")

    def parse(self, buffer, wave: Optional[WaveFile] = None) -> WaveFile:
        """
        Parse a complete WAVE buffer

        Runs header, data and sample stages in order. The first failing
        stage stops the rest and leaves the WaveFile in UNSUPPORTED_FORMAT
        with the error tag set.

        Args:
            buffer: bytes, bytearray or memoryview holding the whole file
            wave: Existing EMPTY or LOADING WaveFile to fill in

        Returns:
            WaveFile in state DONE or UNSUPPORTED_FORMAT
        """
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected a bytes-like buffer, got {type(buffer).__name__}")
        if isinstance(buffer, memoryview):
            # offsets and lengths below count bytes
            buffer = buffer.cast('B')

        if wave is None:
            wave = WaveFile()
        elif wave.state in (ReadyState.DONE, ReadyState.UNSUPPORTED_FORMAT):
            raise ValueError("WaveFile has already been parsed")

        wave.state = ReadyState.LOADING

        try:
            self.parse_header(wave, buffer)
            self.parse_data(wave, buffer)
            self.parse_samples(wave, buffer)
        except UnsupportedFormatError as e:
            logger.debug(f"WAVE parse failed: {e}")
            wave.state = ReadyState.UNSUPPORTED_FORMAT
            wave.error = e.tag
            return wave

        wave.state = ReadyState.DONE
        return wave

    def parse_header(self, wave: WaveFile, buffer):
        """Read the RIFF header and the fixed-offset format fields"""
        if len(buffer) < HEADER_SIZE:
            raise UnsupportedFormatError(
                NOT_SUPPORTED_FORMAT,
                f"Buffer of {len(buffer)} bytes is shorter than the {HEADER_SIZE}-byte header"
            )

        wave.chunk_id = read_text(buffer, 0, 4)
        wave.chunk_size = read_decimal(buffer, 4, 4)
        if wave.chunk_id != 'RIFF':
            raise UnsupportedFormatError(NOT_SUPPORTED_FORMAT, f"Chunk ID {wave.chunk_id!r} is not 'RIFF'")

        wave.format = read_text(buffer, 8, 4)
        if wave.format != 'WAVE':
            raise UnsupportedFormatError(NOT_SUPPORTED_FORMAT, f"Format {wave.format!r} is not 'WAVE'")

        wave.audio_format = read_decimal(buffer, 20, 2)
        wave.num_channels = read_decimal(buffer, 22, 2)
        wave.sample_rate = read_decimal(buffer, 24, 4)
        wave.byte_rate = read_decimal(buffer, 28, 4)
        wave.block_align = read_decimal(buffer, 32, 2)
        wave.bits_per_sample = read_decimal(buffer, 34, 2)

    def parse_data(self, wave: WaveFile, buffer):
        """Locate the data subchunk"""
        wave.chunks = scan_chunks(
            buffer,
            end=wave.chunk_size + CHUNK_HEADER_SIZE,
            policy=self.config.match_policy
        )

        if self.config.scan_mode == 'chunked':
            fmt = wave.chunks.get('fmt ')
            if fmt is not None and fmt.length >= FMT_PAYLOAD_SIZE \
                    and fmt.offset + FMT_PAYLOAD_SIZE <= len(buffer):
                self._read_fmt_chunk(wave, buffer, fmt.offset)
            data = wave.chunks.get('data')
        else:
            matches = stride_scan(buffer, 'data', DATA_SCAN_START, wave.chunk_size)
            data = None
            if matches:
                data = matches[-1] if self.config.match_policy == 'last' else matches[0]
            if len(matches) > 1:
                logger.debug(f"Found {len(matches)} data chunks, keeping the {self.config.match_policy}")

        if data is None:
            raise UnsupportedFormatError(DATA_NOT_FOUND, "No data chunk found")

        wave.data_offset = data.offset
        wave.data_length = data.length

    def parse_samples(self, wave: WaveFile, buffer):
        """Expose the sample bytes as a numpy view typed by bit depth"""
        encoding = wave.encoding
        if encoding is None:
            if self.config.strict_encoding:
                raise UnsupportedFormatError(
                    UNSUPPORTED_ENCODING,
                    f"Unsupported bits per sample: {wave.bits_per_sample}"
                )
            logger.debug(f"No sample view for {wave.bits_per_sample}-bit samples")
            return

        offset = min(wave.data_offset, len(buffer))
        available = len(buffer) - offset
        if self.config.clip_to_data_length:
            available = min(available, wave.data_length)

        count = available // encoding.bytes_per_sample
        samples = np.frombuffer(buffer, dtype=encoding.dtype, count=count, offset=offset)
        samples.flags.writeable = False
        wave.samples = samples

    def _read_fmt_chunk(self, wave: WaveFile, buffer, offset: int):
        wave.audio_format = read_decimal(buffer, offset, 2)
        wave.num_channels = read_decimal(buffer, offset + 2, 2)
        wave.sample_rate = read_decimal(buffer, offset + 4, 4)
        wave.byte_rate = read_decimal(buffer, offset + 8, 4)
        wave.block_align = read_decimal(buffer, offset + 12, 2)
        wave.bits_per_sample = read_decimal(buffer, offset + 14, 2)
