"""Configuration module using Pydantic Settings.

Provides typed duplicator configuration with environment variable support.

Usage:
    from graphdup.config import DuplicationSettings

    settings = DuplicationSettings(allow_raw_allocation=False)
    config = settings.to_config()
"""

from graphdup.config.settings import DuplicationSettings

__all__ = [
    "DuplicationSettings",
]
