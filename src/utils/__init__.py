"""Utility helpers shared across the rom-catalog codebase."""

from .config import AppConfig, FilterSettings, load_config
from .logging import configure_logging, get_logger
from .paths import normalise_path

__all__ = [
    "AppConfig",
    "FilterSettings",
    "load_config",
    "configure_logging",
    "get_logger",
    "normalise_path",
]
