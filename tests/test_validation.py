"""Tests for contract address validation."""

from __future__ import annotations

import pytest

from susbot.exceptions import InvalidAddressError, SusbotError
from susbot.validation import is_valid_address, validate_address


@pytest.mark.parametrize(
    "address",
    [
        "0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c",
        "0x5A0b54D5dC17e0AadC383d2db43B0A0D3E029c4C",
        "0x" + "0" * 40,
    ],
)
def test_valid_addresses_pass_unchanged(address: str) -> None:
    assert validate_address(address) == address
    assert is_valid_address(address) is True


@pytest.mark.parametrize(
    ("address", "reason"),
    [
        ("5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c", "missing '0x' prefix"),
        ("0X5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c", "missing '0x' prefix"),
        ("0x1234", "expected 40 hex characters after the prefix, got 4"),
        ("0x" + "a" * 41, "expected 40 hex characters after the prefix, got 41"),
        ("0x" + "g" * 40, "contains non-hexadecimal characters"),
        ("", "missing '0x' prefix"),
        ("0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c\n", "expected 40 hex characters after the prefix, got 41"),
        (" 0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c", "missing '0x' prefix"),
    ],
)
def test_invalid_addresses_raise_with_reason(address: str, reason: str) -> None:
    with pytest.raises(InvalidAddressError) as excinfo:
        validate_address(address)

    assert excinfo.value.reason == reason
    assert excinfo.value.address == address
    assert is_valid_address(address) is False


def test_non_string_address_is_rejected() -> None:
    with pytest.raises(InvalidAddressError, match="must be a string"):
        validate_address(None)


def test_invalid_address_error_is_a_value_error() -> None:
    error = InvalidAddressError("0x1", "too short")

    assert isinstance(error, ValueError)
    assert isinstance(error, SusbotError)
