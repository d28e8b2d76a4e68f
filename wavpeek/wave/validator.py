"""
Sample-level quality checks for parsed WAVE files
"""
import numpy as np
from typing import Dict, List, Optional
from pathlib import Path
from wavpeek.utils.config import WavpeekConfig
from wavpeek.utils.logger import get_logger
from wavpeek.wave.loader import read_wave
from wavpeek.wave.parser import ReadyState, WaveFile, WaveParser

logger = get_logger()

SILENT_DB = -96.0


def level_db(audio: np.ndarray) -> float:
    """RMS level of normalized audio in dB full scale"""
    if len(audio) == 0:
        return SILENT_DB
    rms = float(np.sqrt(np.mean(np.square(audio, dtype=np.float64))))
    if rms <= 0:
        return SILENT_DB
    return max(SILENT_DB, 20 * np.log10(rms))


class WaveValidator:
    """Checks duration, level, clipping and silence of PCM samples"""

    def __init__(
        self,
        min_duration: float = 0.1,
        max_duration: float = 600.0,
        min_level_db: float = -50.0,
        max_level_db: float = -1.0,
        silence_threshold_db: float = -60.0,
        clipping_threshold: float = 0.99
    ):
        """
        Initialize validator

        Args:
            min_duration: Minimum duration in seconds
            max_duration: Maximum duration in seconds
            min_level_db: Minimum acceptable RMS level in dBFS
            max_level_db: Maximum acceptable RMS level in dBFS
            silence_threshold_db: Frames below this level count as silence
            clipping_threshold: Normalized magnitude counted as clipped
        """
        self.min_duration = min_duration
        self.max_duration = max_duration
        self.min_level_db = min_level_db
        self.max_level_db = max_level_db
        self.silence_threshold_db = silence_threshold_db
        self.clipping_threshold = clipping_threshold

    @classmethod
    def from_config(cls, config: WavpeekConfig) -> 'WaveValidator':
        return cls(
            min_duration=config.min_duration,
            max_duration=config.max_duration,
            min_level_db=config.min_level_db,
            max_level_db=config.max_level_db,
            silence_threshold_db=config.silence_threshold_db
        )

    def validate_wave(self, wave: WaveFile) -> Dict[str, any]:
        """
        Validate a parsed WaveFile

        Args:
            wave: Parsed WaveFile

        Returns:
            Dictionary with validation results:
                - valid: bool
                - issues: List of issue descriptions
                - warnings: List of warning descriptions
                - metrics: Dictionary of audio metrics
        """
        if wave.state != ReadyState.DONE:
            return self._failed(f"Unsupported format ({wave.error})")

        if wave.samples is None:
            return self._failed(f"Unsupported bits per sample: {wave.bits_per_sample}")

        if not wave.sample_rate:
            return self._failed("Sample rate is zero")

        audio = wave.encoding.normalize(wave.samples)

        # Mix interleaved channels down to mono
        channels = wave.num_channels or 1
        if channels > 1:
            usable = len(audio) - len(audio) % channels
            audio = audio[:usable].reshape(-1, channels).mean(axis=1)

        return self.validate_audio(audio, wave.sample_rate)

    def validate_audio(self, audio: np.ndarray, sample_rate: int) -> Dict[str, any]:
        """
        Validate normalized mono audio

        Args:
            audio: Float samples in [-1.0, 1.0]
            sample_rate: Sample rate in Hz

        Returns:
            Validation results dictionary
        """
        issues = []
        warnings = []
        metrics = {}

        if len(audio) == 0:
            return self._failed("No samples")

        duration = len(audio) / sample_rate
        metrics['duration'] = duration

        if duration < self.min_duration:
            issues.append(f"Duration too short ({duration:.2f}s < {self.min_duration}s)")
        elif duration > self.max_duration:
            issues.append(f"Duration too long ({duration:.2f}s > {self.max_duration}s)")

        level = level_db(audio)
        metrics['level_db'] = level

        if level < self.min_level_db:
            issues.append(f"Audio too quiet ({level:.1f} dB < {self.min_level_db:.1f} dB)")
        elif level > self.max_level_db:
            issues.append(f"Audio too loud ({level:.1f} dB > {self.max_level_db:.1f} dB)")
        elif level < self.min_level_db + 10:
            warnings.append(f"Audio level is low ({level:.1f} dB)")

        clipped = np.abs(audio) >= self.clipping_threshold
        if np.any(clipped):
            clip_percentage = float(np.sum(clipped)) / len(audio) * 100
            issues.append(f"Audio clipping detected ({clip_percentage:.1f}% of samples)")
            metrics['clipping'] = True
            metrics['clip_percentage'] = clip_percentage
        else:
            metrics['clipping'] = False

        silence = self._detect_silence(audio, sample_rate)
        silence_percentage = float(np.sum(silence)) / len(audio) * 100
        metrics['silence_percentage'] = silence_percentage

        if silence_percentage > 80:
            issues.append(f"Too much silence ({silence_percentage:.1f}%)")
        elif silence_percentage > 60:
            warnings.append(f"High silence level ({silence_percentage:.1f}%)")

        dc_offset = float(np.mean(audio))
        metrics['dc_offset'] = dc_offset

        if abs(dc_offset) > 0.03:
            warnings.append(f"DC offset detected ({dc_offset:.3f})")

        return {
            'valid': len(issues) == 0,
            'issues': issues,
            'warnings': warnings,
            'metrics': metrics
        }

    def validate_file(
        self,
        file_path: Path,
        parser: Optional[WaveParser] = None
    ) -> Dict[str, any]:
        """
        Validate a WAVE file on disk

        Args:
            file_path: Path to WAVE file
            parser: Parser to use (default settings if None)

        Returns:
            Validation results dictionary
        """
        try:
            if parser is None:
                wave = read_wave(file_path)
            else:
                wave = parser.parse(Path(file_path).read_bytes())
        except OSError as e:
            logger.error(f"Failed to read file {file_path}: {e}")
            return self._failed(f"Failed to read file: {e}")

        return self.validate_wave(wave)

    def batch_validate(
        self,
        files: List[Path],
        parser: Optional[WaveParser] = None
    ) -> Dict[str, any]:
        """
        Validate multiple WAVE files

        Args:
            files: List of file paths
            parser: Parser to use for every file

        Returns:
            Dictionary with batch validation results:
                - total: Total number of files
                - valid: Number of valid files
                - invalid: Number of invalid files
                - results: Dictionary mapping file paths to validation results
        """
        results = {}
        valid_count = 0

        for file_path in files:
            result = self.validate_file(file_path, parser)
            results[str(file_path)] = result
            if result['valid']:
                valid_count += 1

        return {
            'total': len(files),
            'valid': valid_count,
            'invalid': len(files) - valid_count,
            'results': results
        }

    def _detect_silence(self, audio: np.ndarray, sample_rate: int) -> np.ndarray:
        """
        Mark samples that fall in low-energy frames

        Args:
            audio: Normalized audio
            sample_rate: Sample rate

        Returns:
            Boolean array, True where the sample is in a silent frame
        """
        frame_length = max(1, int(0.025 * sample_rate))  # 25ms frames
        hop_length = max(1, int(0.010 * sample_rate))  # 10ms hop

        silence = np.zeros(len(audio), dtype=bool)
        for start in range(0, max(len(audio) - frame_length, 0) + 1, hop_length):
            frame = audio[start:start + frame_length]
            if level_db(frame) < self.silence_threshold_db:
                silence[start:start + frame_length] = True

        return silence

    @staticmethod
    def _failed(issue: str) -> Dict[str, any]:
        return {
            'valid': False,
            'issues': [issue],
            'warnings': [],
            'metrics': {}
        }
