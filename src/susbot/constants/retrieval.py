"""Constants for the contract source retrieval client."""

from __future__ import annotations

ETHERSCAN_OK_STATUS: str = "1"
SOURCE_FILE_HEADER: str = "// File: {path}"
DOUBLE_BRACE_PREFIX: str = "{{"
DOUBLE_BRACE_SUFFIX: str = "}}"
