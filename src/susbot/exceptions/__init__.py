"""Shared exception hierarchy for Susbot."""

from __future__ import annotations

from .base import SusbotError
from .config import ConfigError
from .upstream import UpstreamUnavailableError
from .validation import InvalidAddressError

__all__ = [
    "ConfigError",
    "InvalidAddressError",
    "SusbotError",
    "UpstreamUnavailableError",
]
