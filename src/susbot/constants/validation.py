"""Constants for address validation."""

from __future__ import annotations

import re

ADDRESS_PREFIX: str = "0x"
ADDRESS_HEX_LENGTH: int = 40
ADDRESS_PATTERN: re.Pattern[str] = re.compile(r"0x[0-9a-fA-F]{40}")
