"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "SUSBOT"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ SUSBOT",
    "     // trust scoring for smart contracts",
)
SCAN_SUMMARY_TITLE: str = "Contract scan"
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} contract scanner"))
