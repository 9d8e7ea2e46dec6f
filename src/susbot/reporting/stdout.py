"""Rich stdout reporter for scan reports."""

from __future__ import annotations

import textwrap

from susbot.constants.branding import ASCII_LOGO_LINES, SCAN_SUMMARY_TITLE
from susbot.constants.reporting import ANSI_GREEN, ANSI_RED, ANSI_RESET, ANSI_YELLOW, SEVERITY_COLORS
from susbot.constants.scoring import SEVERITY_LABELS, SEVERITY_ORDER, WEIGHT_TABLE_VERSION
from susbot.model import ScanReport
from susbot.scanner.score import severity_counts

_WRAP_WIDTH: int = 88


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{ANSI_RESET}"


def _color_score(score: int) -> str:
    if score >= 80:
        return _colorize(str(score), ANSI_GREEN)
    if score >= 50:
        return _colorize(str(score), ANSI_YELLOW)
    return _colorize(str(score), ANSI_RED)


class StdoutReporter:
    """Formats a scan report as human-readable stdout output."""

    def __init__(
        self,
        report: ScanReport,
        *,
        color: bool = True,
        verbose: bool = False,
        fail_below: int | None = None,
    ) -> None:
        """Initialise the reporter."""
        self._report = report
        self._color = color
        self._verbose = verbose
        self._fail_below = fail_below

    def render(self) -> str:
        """Render the full stdout report as a single string."""
        sections = [self._render_header(), self._render_risks(), self._render_summary()]
        return "\n".join(section for section in sections if section)

    def _render_header(self) -> str:
        report = self._report
        result = report.result
        sep = "  " + "─" * 38
        score_str = _color_score(result.score) if self._color else str(result.score)

        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            f"  {ASCII_LOGO_LINES[1]}",
            f"  {SCAN_SUMMARY_TITLE}",
            sep,
            "",
            f"  Trust Score {score_str} / 100",
            f"  Contract    {report.contract_name or 'unknown'}",
            f"  Address     {report.address}",
            f"  Source      {report.retrieval_status}",
            f"  Findings    {len(report.findings)}",
            f"  Severities  {self._format_severity_breakdown()}",
        ]
        verdict = self._render_verdict()
        if verdict is not None:
            lines.append(f"  Verdict     {verdict}")
        if self._verbose:
            lines.append(f"  Summary by  {report.summary_source}")
            lines.append(f"  Weights     {WEIGHT_TABLE_VERSION}")
        lines.append("")
        return "\n".join(lines)

    def _render_risks(self) -> str:
        if not self._report.findings:
            return ""
        lines = ["  Risks"]
        for finding, risk in zip(self._report.findings, self._report.result.risks, strict=True):
            if self._color:
                label = SEVERITY_LABELS[finding.severity]
                risk = risk.replace(f"[{label}]", f"[{_colorize(label, SEVERITY_COLORS[finding.severity])}]", 1)
            lines.append(f"  - {risk}")
            if self._verbose:
                lines.append(f"    ({finding.rule_id})")
        lines.append("")
        return "\n".join(lines)

    def _render_summary(self) -> str:
        wrapped = textwrap.fill(
            self._report.result.summary,
            width=_WRAP_WIDTH,
            initial_indent="  ",
            subsequent_indent="  ",
        )
        return "\n".join(["  Summary", wrapped, ""])

    def _format_severity_breakdown(self) -> str:
        """Render per-severity finding counts in fixed order."""
        counts = severity_counts(self._report.findings)
        parts: list[str] = []
        for severity in SEVERITY_ORDER:
            label = severity
            if self._color:
                label = _colorize(severity, SEVERITY_COLORS[severity])
            parts.append(f"{counts[severity]} {label}")
        return " · ".join(parts)

    def _render_verdict(self) -> str | None:
        """Render the CI threshold verdict when ``fail_below`` is configured."""
        if self._fail_below is None:
            return None
        score = self._report.result.score
        if score < self._fail_below:
            return f"FAIL (score {score} < {self._fail_below})"
        return f"PASS (score {score} >= {self._fail_below})"
