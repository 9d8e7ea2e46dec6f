"""Cross-module type aliases."""

from __future__ import annotations

from typing import Literal, TypeAlias

Severity: TypeAlias = Literal["critical", "high", "medium", "low", "info"]
RetrievalStatus: TypeAlias = Literal["full", "partial_unverified", "unavailable"]
SummarySource: TypeAlias = Literal["ai", "fallback"]
ScanStage: TypeAlias = Literal[
    "start",
    "validating",
    "retrieving",
    "analyzing",
    "explaining",
    "assembling",
    "done",
    "failed",
]

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]
