"""Utility functions and classes for wavpeek"""

from wavpeek.utils.config import ConfigManager, WavpeekConfig
from wavpeek.utils.logger import setup_logger, get_logger
from wavpeek.utils.progress import ProgressTracker

__all__ = [
    'ConfigManager',
    'WavpeekConfig',
    'setup_logger',
    'get_logger',
    'ProgressTracker'
]
