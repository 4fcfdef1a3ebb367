"""
Cleaning rules configuration management.
"""

from .cleaning_config import CleaningConfig
from .config_loader import CleaningConfigLoader, load_cleaning_config

__all__ = [
    "CleaningConfig",
    "CleaningConfigLoader",
    "load_cleaning_config",
]
