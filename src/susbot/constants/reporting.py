"""Constants for report rendering and JSON output."""

from __future__ import annotations

REPORT_TEMP_PREFIX: str = ".tmp-"
REPORT_TEMP_SUFFIX: str = ".json"

FALLBACK_SUMMARY_TEMPLATE: str = (
    "Analysis complete. Found {critical} critical, {high} high, {medium} medium, {low} low risks."
)
TRUNCATION_MARKER: str = "..."

# ANSI escape codes for terminal colouring.
ANSI_RESET: str = "\033[0m"
ANSI_RED: str = "\033[31;1m"
ANSI_YELLOW: str = "\033[33;1m"
ANSI_GREEN: str = "\033[32;1m"
ANSI_DIM: str = "\033[2m"

SEVERITY_COLORS: dict[str, str] = {
    "critical": ANSI_RED,
    "high": ANSI_RED,
    "medium": ANSI_YELLOW,
    "low": ANSI_GREEN,
    "info": ANSI_DIM,
}
