"""Configuration module for nippo."""

from nippo.config.logging import configure_logging
from nippo.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
