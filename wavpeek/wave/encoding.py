"""
Supported PCM sample encodings
"""
from enum import Enum
from typing import Optional

import numpy as np


class SampleEncoding(Enum):
    """Closed set of sample encodings, keyed by bits per sample"""

    UNSIGNED_8 = 8
    SIGNED_16 = 16

    @property
    def dtype(self) -> np.dtype:
        """numpy dtype used for the sample view"""
        if self is SampleEncoding.UNSIGNED_8:
            return np.dtype('u1')
        return np.dtype('<i2')

    @property
    def bytes_per_sample(self) -> int:
        return self.value // 8

    @property
    def full_scale(self) -> float:
        """Magnitude that maps to 1.0 after normalization"""
        return 128.0 if self is SampleEncoding.UNSIGNED_8 else 32768.0

    @property
    def midpoint(self) -> float:
        """Sample value representing silence"""
        return 128.0 if self is SampleEncoding.UNSIGNED_8 else 0.0

    def normalize(self, samples: np.ndarray) -> np.ndarray:
        """
        Convert raw samples to float32 in [-1.0, 1.0)

        Args:
            samples: Raw sample view in this encoding

        Returns:
            New float32 array
        """
        return (samples.astype(np.float32) - self.midpoint) / self.full_scale

    @classmethod
    def from_bits(cls, bits_per_sample: Optional[int]) -> Optional['SampleEncoding']:
        """Look up the encoding for a bit depth, None when unsupported"""
        try:
            return cls(bits_per_sample)
        except ValueError:
            return None
