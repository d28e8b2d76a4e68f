"""
wavpeek: WAVE (RIFF/PCM) header parser and sample inspector
"""
from wavpeek.wave import (
    ReadyState,
    SampleEncoding,
    UnsupportedFormatError,
    WaveFile,
    WaveLoader,
    WaveParser,
    read_wave,
)

__version__ = '0.1.0'

__all__ = [
    'ReadyState',
    'SampleEncoding',
    'UnsupportedFormatError',
    'WaveFile',
    'WaveLoader',
    'WaveParser',
    'read_wave',
    '__version__'
]
