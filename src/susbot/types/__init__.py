"""Shared type aliases for Susbot."""

from .common import JsonObject, JsonScalar, JsonValue, RetrievalStatus, ScanStage, Severity, SummarySource

__all__ = [
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "RetrievalStatus",
    "ScanStage",
    "Severity",
    "SummarySource",
]
