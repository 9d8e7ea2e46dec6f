"""Deterministic prompt construction for the explanation service."""

from __future__ import annotations

from collections.abc import Sequence

from susbot.constants.explain import EMPTY_GROUP_MARKER, PROMPT_INSTRUCTIONS, PROMPT_ROLE_LINE
from susbot.constants.scoring import SEVERITY_LABELS, SEVERITY_ORDER, WEIGHT_TABLE_VERSION
from susbot.model import Finding, SourceBundle


def build_prompt(findings: Sequence[Finding], score: int, bundle: SourceBundle) -> str:
    """Render findings grouped by severity, the score, and the reply instructions.

    Identical inputs always produce an identical prompt.
    """
    lines = [
        PROMPT_ROLE_LINE,
        "",
        f"Contract: {bundle.contract_name or 'unknown'}",
        f"Address: {bundle.address}",
        f"Source status: {bundle.status}",
        f"Trust score: {score}/100 (weight table {WEIGHT_TABLE_VERSION}, computed locally and final)",
        "",
        "Findings:",
    ]
    for severity in SEVERITY_ORDER:
        lines.append(f"{SEVERITY_LABELS[severity]}:")
        group = [finding for finding in findings if finding.severity == severity]
        if not group:
            lines.append(EMPTY_GROUP_MARKER)
            continue
        lines.extend(f"- {finding.title} ({finding.rule_id}): {finding.description}" for finding in group)

    lines.append("")
    lines.append("Instructions:")
    lines.extend(f"- {instruction}" for instruction in PROMPT_INSTRUCTIONS)
    return "\n".join(lines)
