"""Turn explanation replies into summary text, or fall back to a local template."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from susbot.constants.reporting import FALLBACK_SUMMARY_TEMPLATE, TRUNCATION_MARKER
from susbot.model import Finding
from susbot.scanner.score import severity_counts

logger = logging.getLogger(__name__)

_FENCE_PATTERN: re.Pattern[str] = re.compile(r"^```[\w-]*\s*(?P<body>.*?)\s*```$", re.DOTALL)


def fallback_summary(findings: Sequence[Finding]) -> str:
    """Build the templated summary used when no explanation is available."""
    counts = severity_counts(findings)
    return FALLBACK_SUMMARY_TEMPLATE.format(
        critical=counts["critical"],
        high=counts["high"],
        medium=counts["medium"],
        low=counts["low"],
    )


def extract_explanation(reply: str, *, score: int, max_chars: int) -> str:
    """Take the explanatory text from a reply; the reply's own score is never used.

    JSON replies contribute only their ``verdict``, ``summary`` and
    ``recommendations``, so a JSON object without them yields ``""``.
    Anything else passes through as opaque text. The result is clamped to
    *max_chars* and may be empty.
    """
    text = reply.strip()
    fenced = _FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group("body").strip()

    payload = _parse_json_object(text)
    if payload is not None:
        reported = payload.get("score")
        if reported is not None and _as_int(reported) != score:
            logger.warning("Discarding explanation score %r; keeping computed score %d", reported, score)
        text = _compose(payload)

    return clamp_text(text, max_chars)


def clamp_text(text: str, max_chars: int) -> str:
    """Trim whitespace and cut *text* to at most *max_chars* characters."""
    text = text.strip()
    if len(text) <= max_chars:
        return text
    if max_chars <= len(TRUNCATION_MARKER):
        return text[:max_chars]
    return text[: max_chars - len(TRUNCATION_MARKER)].rstrip() + TRUNCATION_MARKER


def _parse_json_object(text: str) -> dict[str, Any] | None:
    if not text.startswith("{"):
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _compose(payload: dict[str, Any]) -> str:
    parts: list[str] = []
    verdict = payload.get("verdict")
    if isinstance(verdict, str) and verdict.strip():
        parts.append(f"Verdict: {verdict.strip().rstrip('.')}.")
    summary = payload.get("summary")
    if isinstance(summary, str) and summary.strip():
        parts.append(summary.strip())
    recommendations = payload.get("recommendations")
    if isinstance(recommendations, list):
        items = [item.strip() for item in recommendations if isinstance(item, str) and item.strip()]
        if items:
            parts.append("Recommendations: " + "; ".join(items))
    return " ".join(parts)


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
