"""Configuration — settings, config-file discovery and logging setup."""

from bootkit.config.settings import BootSettings

__all__ = ["BootSettings"]
