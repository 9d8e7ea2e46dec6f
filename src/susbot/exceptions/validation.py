"""Input validation exceptions."""

from __future__ import annotations

from susbot.exceptions.base import SusbotError


class InvalidAddressError(SusbotError, ValueError):
    """Raised when a contract address is malformed.

    This is the only error the public scan entry point surfaces to callers.
    """

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid address {address!r}: {reason}")
