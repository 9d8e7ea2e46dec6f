"""Base exception for Susbot."""

from __future__ import annotations


class SusbotError(Exception):
    """Base class for all Susbot errors."""
