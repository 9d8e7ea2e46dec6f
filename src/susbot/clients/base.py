"""Interfaces for the external collaborators a scan depends on."""

from __future__ import annotations

from typing import Protocol

from susbot.model import SourceBundle


class SourceRetriever(Protocol):
    """Address-indexed lookup of contract source and holder data."""

    def fetch(self, address: str) -> SourceBundle:
        """Return the bundle for *address* or raise `UpstreamUnavailableError`."""
        ...


class TextCompleter(Protocol):
    """Prompt-in, free-text-out generation service."""

    def complete(self, prompt: str) -> str:
        """Return generated text or raise `UpstreamUnavailableError`."""
        ...
