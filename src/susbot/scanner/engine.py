"""Static analysis engine: runs every enabled detector over one bundle."""

from __future__ import annotations

import logging

from susbot.config import SusbotConfig, effective_detector_ids
from susbot.constants.detectors import DEFAULT_DETECTORS, SOURCE_UNAVAILABLE_RULE_ID
from susbot.constants.scoring import SEVERITY_RANK
from susbot.detectors import build_detectors, build_source_view
from susbot.model import Finding, SourceBundle

logger = logging.getLogger(__name__)

_DECLARATION_INDEX: dict[str, int] = {
    rule_id: index for index, rule_id in enumerate((*DEFAULT_DETECTORS, SOURCE_UNAVAILABLE_RULE_ID))
}

SOURCE_UNAVAILABLE_FINDING: Finding = Finding(
    rule_id=SOURCE_UNAVAILABLE_RULE_ID,
    severity="info",
    title="Source Unavailable",
    description=(
        "No contract source code could be retrieved, so the contract could not be audited. "
        "Unknown code is not evidence of safe code."
    ),
)


def analyze_bundle(bundle: SourceBundle, config: SusbotConfig) -> tuple[Finding, ...]:
    """Return ordered, deduplicated findings for *bundle*.

    An unavailable bundle yields only the source-unavailable finding: no
    detector runs against code that could not be seen.
    """
    if bundle.status == "unavailable":
        logger.debug("No source for %s; skipping detectors", bundle.address)
        return (SOURCE_UNAVAILABLE_FINDING,)

    view = build_source_view(bundle.source_text)
    findings: list[Finding] = []
    for detector in build_detectors(effective_detector_ids(config)):
        finding = detector.run(bundle=bundle, view=view, config=config)
        if finding is not None:
            findings.append(finding)
    logger.debug("Detectors produced %d finding(s) for %s", len(findings), bundle.address)
    return order_findings(dedupe_findings(findings))


def dedupe_findings(findings: list[Finding]) -> list[Finding]:
    """Keep the first finding per rule id."""
    seen: set[str] = set()
    deduped: list[Finding] = []
    for finding in findings:
        if finding.rule_id in seen:
            continue
        seen.add(finding.rule_id)
        deduped.append(finding)
    return deduped


def order_findings(findings: list[Finding]) -> tuple[Finding, ...]:
    """Sort by severity descending, then detector declaration order."""
    return tuple(
        sorted(
            findings,
            key=lambda finding: (
                -SEVERITY_RANK[finding.severity],
                _DECLARATION_INDEX.get(finding.rule_id, len(_DECLARATION_INDEX)),
                finding.rule_id,
            ),
        )
    )
