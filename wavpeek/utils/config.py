"""
Configuration management for wavpeek

Parser behaviour and validation thresholds are stored as YAML, by default
in the user's home directory.
"""
import yaml
from pathlib import Path
from typing import Dict, Optional, Any
from dataclasses import dataclass, asdict, fields
from wavpeek.utils.logger import get_logger

logger = get_logger()

SCAN_MODES = ('stride', 'chunked')
MATCH_POLICIES = ('last', 'first')


@dataclass
class WavpeekConfig:
    """Parser and validator settings"""

    # Parser settings
    scan_mode: str = 'stride'  # fixed 4-byte stepping, or chunk-length walk
    match_policy: str = 'last'  # which data chunk wins when several exist
    strict_encoding: bool = False
    clip_to_data_length: bool = False

    # Loader settings
    max_workers: int = 1

    # Validation settings
    min_duration: float = 0.1
    max_duration: float = 600.0
    min_level_db: float = -50.0
    max_level_db: float = -1.0
    silence_threshold_db: float = -60.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    def save(self, path: Path):
        """
        Save configuration to YAML file

        Args:
            path: Path to save config file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved config to {path}")

    @classmethod
    def load(cls, path: Path) -> 'WavpeekConfig':
        """
        Load configuration from YAML file

        Unknown keys are ignored with a warning so that older config files
        keep working.

        Args:
            path: Path to config file

        Returns:
            WavpeekConfig instance
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning(f"Unknown config parameter: {key}")

        return cls(**{k: v for k, v in data.items() if k in known})

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []

        if self.scan_mode not in SCAN_MODES:
            issues.append(f"Scan mode should be one of {', '.join(SCAN_MODES)}")

        if self.match_policy not in MATCH_POLICIES:
            issues.append(f"Match policy should be one of {', '.join(MATCH_POLICIES)}")

        if self.max_workers < 1:
            issues.append("Max workers should be at least 1")

        if self.min_duration < 0 or self.min_duration > self.max_duration:
            issues.append("Duration bounds should satisfy 0 <= min_duration <= max_duration")

        if self.min_level_db > self.max_level_db:
            issues.append("Minimum level should not exceed maximum level")

        if self.max_level_db > 0:
            issues.append("Maximum level should be at most 0 dB")

        return len(issues) == 0, issues

    def update(self, **kwargs):
        """
        Update configuration parameters

        Args:
            **kwargs: Parameters to update
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning(f"Unknown config parameter: {key}")


class ConfigManager:
    """Locates, loads and saves the wavpeek configuration file"""

    DEFAULT_PATH = Path.home() / '.wavpeek.yaml'

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager

        Args:
            config_path: Path to config file (default: ~/.wavpeek.yaml)
        """
        self.config_path = Path(config_path) if config_path else self.DEFAULT_PATH

    def exists(self) -> bool:
        """Check if config file exists"""
        return self.config_path.exists()

    def load(self) -> WavpeekConfig:
        """
        Load configuration

        Returns:
            WavpeekConfig instance

        Raises:
            FileNotFoundError: If config doesn't exist
        """
        if not self.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        return WavpeekConfig.load(self.config_path)

    def load_or_default(self) -> WavpeekConfig:
        """Load configuration, falling back to defaults when no file exists"""
        if not self.exists():
            logger.debug(f"No config at {self.config_path}, using defaults")
            return WavpeekConfig()
        return self.load()

    def save(self, config: WavpeekConfig):
        """Save configuration"""
        config.save(self.config_path)

    def create_default(self) -> WavpeekConfig:
        """
        Create and save default configuration

        Returns:
            Created WavpeekConfig instance
        """
        config = WavpeekConfig()
        self.save(config)
        return config

    def update(self, **kwargs):
        """
        Update and save configuration

        Args:
            **kwargs: Parameters to update
        """
        config = self.load()
        config.update(**kwargs)
        self.save(config)
