"""Core application configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Logging setup (logging.py)
- Base exceptions (exceptions.py)
"""

from flowcheck.core.config import settings
from flowcheck.core.exceptions import AppError

__all__ = [
    "AppError",
    "settings",
]
