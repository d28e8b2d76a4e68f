"""
WAVE parsing, loading and validation for wavpeek
"""
from wavpeek.wave.chunks import ChunkInfo, scan_chunks
from wavpeek.wave.encoding import SampleEncoding
from wavpeek.wave.parser import (
    ReadyState,
    UnsupportedFormatError,
    WaveFile,
    WaveParser,
    NOT_SUPPORTED_FORMAT,
    DATA_NOT_FOUND,
    UNSUPPORTED_ENCODING,
    READ_FAILED
)
from wavpeek.wave.loader import WaveLoad, WaveLoader, read_wave
from wavpeek.wave.validator import WaveValidator

__all__ = [
    'ChunkInfo',
    'scan_chunks',
    'SampleEncoding',
    'ReadyState',
    'UnsupportedFormatError',
    'WaveFile',
    'WaveParser',
    'NOT_SUPPORTED_FORMAT',
    'DATA_NOT_FOUND',
    'UNSUPPORTED_ENCODING',
    'READ_FAILED',
    'WaveLoad',
    'WaveLoader',
    'read_wave',
    'WaveValidator'
]
