"""
Little-endian integer and ASCII tag helpers for RIFF buffers
"""


def from_little_endian(data) -> int:
    """
    Decode an unsigned little-endian integer

    Each byte is shifted left by 8 * index and OR-ed into the result.

    Args:
        data: Bytes-like slice of at most 4 bytes

    Returns:
        Unsigned integer value
    """
    if len(data) > 4:
        raise ValueError(f"Expected at most 4 bytes, got {len(data)}")

    value = 0
    for index, byte in enumerate(bytes(data)):
        value |= byte << (8 * index)
    return value


def to_little_endian(value: int, length: int) -> bytes:
    """
    Encode an unsigned integer into little-endian bytes

    Bits above 8 * length are dropped.

    Args:
        value: Integer to encode
        length: Number of output bytes

    Returns:
        Encoded bytes
    """
    if length < 0:
        raise ValueError("Length must be non-negative")

    out = bytearray(length)
    for index in range(length):
        out[index] = value & 0xFF
        value >>= 8
    return bytes(out)


def read_decimal(buffer, start: int, length: int) -> int:
    """Read an unsigned little-endian integer at a fixed offset"""
    if start < 0 or start + length > len(buffer):
        raise IndexError(f"Read of {length} bytes at {start} exceeds buffer of {len(buffer)}")
    return from_little_endian(buffer[start:start + length])


def read_text(buffer, start: int, length: int) -> str:
    """Read a slice as text, one character per byte"""
    if start < 0 or start + length > len(buffer):
        raise IndexError(f"Read of {length} bytes at {start} exceeds buffer of {len(buffer)}")
    return bytes(buffer[start:start + length]).decode('latin-1')
