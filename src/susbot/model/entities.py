"""Immutable value objects passed between scan stages."""

from __future__ import annotations

from dataclasses import dataclass

from susbot.constants.scoring import SEVERITY_LABELS
from susbot.types import JsonObject, RetrievalStatus, Severity, SummarySource


@dataclass(frozen=True)
class HolderShare:
    """One holder's share of the token supply, in percent."""

    holder: str
    percent: float


@dataclass(frozen=True)
class SourceBundle:
    """Retrieved material for one address.

    ``status`` tags the retrieval outcome so downstream stages branch on it
    instead of inferring state from an empty ``source_text``.
    """

    address: str
    source_text: str
    is_verified: bool
    status: RetrievalStatus
    holders: tuple[HolderShare, ...] = ()
    contract_name: str = ""

    @classmethod
    def from_retrieval(
        cls,
        *,
        address: str,
        source_text: str,
        is_verified: bool,
        holders: tuple[HolderShare, ...] = (),
        contract_name: str = "",
    ) -> SourceBundle:
        """Build a bundle and derive its status from what was retrieved."""
        status: RetrievalStatus
        if not source_text.strip():
            status = "unavailable"
        elif not is_verified:
            status = "partial_unverified"
        else:
            status = "full"
        return cls(
            address=address,
            source_text=source_text,
            is_verified=is_verified,
            status=status,
            holders=holders,
            contract_name=contract_name,
        )

    @classmethod
    def unavailable(cls, address: str) -> SourceBundle:
        """Build the empty bundle used when retrieval failed outright."""
        return cls(address=address, source_text="", is_verified=False, status="unavailable")


@dataclass(frozen=True)
class Finding:
    """A single detector result."""

    rule_id: str
    severity: Severity
    title: str
    description: str

    def to_risk_string(self) -> str:
        """Render as ``[Severity] Title: Description``."""
        return f"[{SEVERITY_LABELS[self.severity]}] {self.title}: {self.description}"

    def to_dict(self) -> JsonObject:
        """Serialize finding into JSON-compatible dict."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class ScanResult:
    """Final report returned by the public entry point."""

    score: int
    risks: tuple[str, ...]
    summary: str

    def to_dict(self) -> JsonObject:
        """Serialize result into JSON-compatible dict."""
        return {
            "score": self.score,
            "risks": list(self.risks),
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ScanReport:
    """A ``ScanResult`` together with the intermediate data that produced it."""

    address: str
    result: ScanResult
    findings: tuple[Finding, ...]
    retrieval_status: RetrievalStatus
    summary_source: SummarySource
    contract_name: str = ""

    def to_dict(self) -> JsonObject:
        """Serialize report, including scan metadata, into a JSON-compatible dict."""
        payload = self.result.to_dict()
        payload["address"] = self.address
        payload["contract_name"] = self.contract_name
        payload["retrieval_status"] = self.retrieval_status
        payload["summary_source"] = self.summary_source
        payload["findings"] = [finding.to_dict() for finding in self.findings]
        return payload
