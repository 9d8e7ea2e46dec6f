"""Configuration-related exceptions."""

from __future__ import annotations

from susbot.exceptions.base import SusbotError


class ConfigError(SusbotError, ValueError):
    """Raised when scanner configuration is invalid."""
