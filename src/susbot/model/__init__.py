"""Core data models for Susbot."""

from .entities import Finding, HolderShare, ScanReport, ScanResult, SourceBundle

__all__ = [
    "Finding",
    "HolderShare",
    "ScanReport",
    "ScanResult",
    "SourceBundle",
]
