"""Input validation for the public scan entry point."""

from __future__ import annotations

from susbot.constants.validation import ADDRESS_HEX_LENGTH, ADDRESS_PATTERN, ADDRESS_PREFIX
from susbot.exceptions import InvalidAddressError


def validate_address(address: object) -> str:
    """Return *address* unchanged if it is a canonical EVM address, else raise.

    Runs before any outcall, so a rejected address never reaches the network.
    """
    if not isinstance(address, str):
        raise InvalidAddressError(repr(address), "address must be a string")
    if ADDRESS_PATTERN.fullmatch(address):
        return address

    if not address.startswith(ADDRESS_PREFIX):
        reason = f"missing '{ADDRESS_PREFIX}' prefix"
    elif len(address) != len(ADDRESS_PREFIX) + ADDRESS_HEX_LENGTH:
        hex_length = len(address) - len(ADDRESS_PREFIX)
        reason = f"expected {ADDRESS_HEX_LENGTH} hex characters after the prefix, got {hex_length}"
    else:
        reason = "contains non-hexadecimal characters"
    raise InvalidAddressError(address, reason)


def is_valid_address(address: object) -> bool:
    """Return True when *address* passes `validate_address`."""
    try:
        validate_address(address)
    except InvalidAddressError:
        return False
    return True
