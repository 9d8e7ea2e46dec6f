"""Scoring utilities for findings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from susbot.config import SeverityWeights
from susbot.constants.scoring import SCORE_MAX, SCORE_MIN, SEVERITY_ORDER
from susbot.model import Finding


def compute_score(findings: Iterable[Finding], weights: SeverityWeights | None = None) -> int:
    """Aggregate findings into a single 0-100 trust score.

    Starts at 100 and subtracts each finding's severity weight, clamped at 0.
    Total over every input, including the empty list. Weights are
    non-negative, so adding a finding never raises the score.
    """
    table = weights or SeverityWeights()
    deduction = sum(table.weight_for(finding.severity) for finding in findings)
    return max(SCORE_MIN, min(SCORE_MAX, SCORE_MAX - deduction))


def severity_counts(findings: Iterable[Finding]) -> dict[str, int]:
    """Count findings by severity with stable keys."""
    counts = Counter(finding.severity for finding in findings)
    return {severity: int(counts.get(severity, 0)) for severity in SEVERITY_ORDER}
