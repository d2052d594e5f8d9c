"""Application-wide settings."""

from artisan_rank.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
