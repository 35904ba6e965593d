"""Application configuration."""

from yardly.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
