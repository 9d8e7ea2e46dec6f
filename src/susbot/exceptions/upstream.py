"""Exceptions raised by external collaborator clients."""

from __future__ import annotations

from susbot.exceptions.base import SusbotError


class UpstreamUnavailableError(SusbotError):
    """Raised when a retrieval or explanation service fails or times out."""

    def __init__(self, service: str, detail: str) -> None:
        self.service = service
        self.detail = detail
        super().__init__(f"{service} unavailable: {detail}")
