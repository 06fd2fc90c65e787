"""
Application configuration package
"""

from .settings import Settings, settings
from .logging_config import logger, setup_logger, get_logger

__all__ = [
    "Settings",
    "settings",
    "logger",
    "setup_logger",
    "get_logger",
]
