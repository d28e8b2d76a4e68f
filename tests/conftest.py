"""
Shared WAVE buffer builders for tests
"""
import struct

import numpy as np
import pytest


def fmt_payload(bits=16, channels=1, rate=16000, audio_format=1):
    block_align = channels * bits // 8
    return struct.pack('<HHIIHH', audio_format, channels, rate, rate * block_align, block_align, bits)


def chunk(tag, payload, pad=True):
    data = tag + struct.pack('<I', len(payload)) + payload
    if pad and len(payload) % 2:
        data += b'\x00'
    return data


def build_wave(data=b'', bits=16, channels=1, rate=16000, before_data=(), after_data=(), fmt=True):
    """
    Assemble a RIFF/WAVE buffer

    Args:
        data: Raw sample bytes for the data chunk
        before_data: Extra (tag, payload) chunks placed between fmt and data
        after_data: Extra raw bytes appended after the data chunk
        fmt: Include a canonical fmt chunk right after the RIFF header
    """
    body = b'WAVE'
    if fmt:
        body += chunk(b'fmt ', fmt_payload(bits, channels, rate))
    for tag, payload in before_data:
        body += chunk(tag, payload)
    if data is not None:
        body += chunk(b'data', data)
    for extra in after_data:
        body += extra
    return b'RIFF' + struct.pack('<I', len(body)) + body


@pytest.fixture
def sine_wave():
    """One second of a 440 Hz tone at half scale, 16-bit mono 16 kHz"""
    t = np.arange(16000) / 16000
    audio = (0.5 * 32767 * np.sin(2 * np.pi * 440 * t)).astype('<i2')
    return build_wave(audio.tobytes())
