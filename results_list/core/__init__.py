"""Core app configuration and logging."""

from results_list.core.config import get_settings, settings
from results_list.core.logging import configure_logging

__all__ = ["configure_logging", "get_settings", "settings"]
