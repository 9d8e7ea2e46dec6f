"""Constants for severity ordering and score arithmetic."""

from __future__ import annotations

SCORE_MAX: int = 100
SCORE_MIN: int = 0

# Bump whenever a default weight changes so published scores stay comparable.
WEIGHT_TABLE_VERSION: str = "v1"

SEVERITY_ORDER: tuple[str, ...] = ("critical", "high", "medium", "low", "info")
SEVERITY_RANK: dict[str, int] = {"info": 0, "low": 1, "medium": 2, "high": 3, "critical": 4}
SEVERITY_LABELS: dict[str, str] = {
    "critical": "Critical",
    "high": "High",
    "medium": "Medium",
    "low": "Low",
    "info": "Info",
}

DEFAULT_SEVERITY_WEIGHTS: dict[str, int] = {
    "critical": 40,
    "high": 20,
    "medium": 10,
    "low": 4,
    "info": 0,
}
