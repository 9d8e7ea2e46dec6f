"""End-to-end scan orchestration for Susbot.

One scan walks ``validating -> retrieving -> analyzing -> explaining ->
assembling -> done``. Only validation can fail; every later stage degrades
to fallback data instead. All per-scan data lives in locals, so concurrent
scans share nothing.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack

from susbot.clients import ChatCompletionClient, EtherscanRetriever, SourceRetriever, TextCompleter
from susbot.config import SusbotConfig, load_config
from susbot.exceptions import InvalidAddressError, UpstreamUnavailableError
from susbot.model import Finding, ScanReport, ScanResult, SourceBundle
from susbot.reporting.prompt import build_prompt
from susbot.reporting.summary import extract_explanation, fallback_summary
from susbot.scanner.engine import analyze_bundle
from susbot.scanner.score import compute_score
from susbot.types import ScanStage, SummarySource
from susbot.validation import validate_address

logger = logging.getLogger(__name__)


def _transition(address: str, stage: ScanStage) -> None:
    logger.debug("scan %s: %s", address, stage)


class ScanOrchestrator:
    """Sequence retrieval, analysis, explanation and assembly for one address at a time."""

    def __init__(
        self,
        config: SusbotConfig,
        *,
        retriever: SourceRetriever,
        completer: TextCompleter | None = None,
    ) -> None:
        self._config = config
        self._retriever = retriever
        self._completer = completer

    def analyze_address(self, address: str) -> ScanResult:
        """Scan *address* and return the compact result."""
        return self.scan(address).result

    def scan(self, address: str) -> ScanReport:
        """Scan *address* and return the result with its intermediate data.

        Raises `InvalidAddressError` for malformed input; never raises after
        validation passes.
        """
        _transition(address, "start")
        _transition(address, "validating")
        try:
            validate_address(address)
        except InvalidAddressError:
            _transition(address, "failed")
            raise

        _transition(address, "retrieving")
        bundle = self._retrieve(address)

        _transition(address, "analyzing")
        findings = analyze_bundle(bundle, self._config)
        score = compute_score(findings, self._config.severity_weights)

        _transition(address, "explaining")
        summary, summary_source = self._explain(findings, score, bundle)

        _transition(address, "assembling")
        report = ScanReport(
            address=address,
            result=ScanResult(
                score=score,
                risks=tuple(finding.to_risk_string() for finding in findings),
                summary=summary,
            ),
            findings=findings,
            retrieval_status=bundle.status,
            summary_source=summary_source,
            contract_name=bundle.contract_name,
        )
        _transition(address, "done")
        logger.info(
            "Scanned %s: score=%d findings=%d source=%s summary=%s",
            address,
            score,
            len(findings),
            bundle.status,
            summary_source,
        )
        return report

    def _retrieve(self, address: str) -> SourceBundle:
        try:
            return self._retriever.fetch(address)
        except UpstreamUnavailableError as exc:
            logger.warning("Retrieval failed for %s (%s); continuing without source", address, exc)
        except Exception:
            logger.exception("Unexpected retrieval failure for %s; continuing without source", address)
        return SourceBundle.unavailable(address)

    def _explain(
        self,
        findings: tuple[Finding, ...],
        score: int,
        bundle: SourceBundle,
    ) -> tuple[str, SummarySource]:
        if self._completer is None:
            return fallback_summary(findings), "fallback"

        prompt = build_prompt(findings, score, bundle)
        try:
            reply = self._completer.complete(prompt)
            summary = extract_explanation(reply, score=score, max_chars=self._config.summary_max_chars)
        except UpstreamUnavailableError as exc:
            logger.warning("Explanation failed for %s (%s); using fallback summary", bundle.address, exc)
            return fallback_summary(findings), "fallback"
        except Exception:
            logger.exception("Unexpected explanation failure for %s; using fallback summary", bundle.address)
            return fallback_summary(findings), "fallback"

        if not summary:
            logger.warning("Explanation for %s was empty; using fallback summary", bundle.address)
            return fallback_summary(findings), "fallback"
        return summary, "ai"


def scan_address(
    address: str,
    *,
    config: SusbotConfig | None = None,
    retriever: SourceRetriever | None = None,
    completer: TextCompleter | None = None,
    use_ai: bool = True,
) -> ScanReport:
    """Scan *address* with default HTTP clients for any collaborator not supplied.

    The address is validated before any client is built. The explanation
    client is only built when *use_ai* is set and an API key is configured.
    """
    validate_address(address)
    resolved = config or load_config()

    with ExitStack() as stack:
        if retriever is None:
            retriever = stack.enter_context(
                EtherscanRetriever(
                    resolved.retrieval,
                    timeout=resolved.timeout_seconds,
                    top_n=resolved.holder_concentration.top_n,
                )
            )
        if not use_ai:
            completer = None
        elif completer is None and resolved.explanation.api_key:
            completer = stack.enter_context(
                ChatCompletionClient(resolved.explanation, timeout=resolved.timeout_seconds)
            )
        elif completer is None:
            logger.info("No explanation API key configured; using fallback summary")

        orchestrator = ScanOrchestrator(resolved, retriever=retriever, completer=completer)
        return orchestrator.scan(address)


def analyze_address(
    address: str,
    *,
    config: SusbotConfig | None = None,
    retriever: SourceRetriever | None = None,
    completer: TextCompleter | None = None,
    use_ai: bool = True,
) -> ScanResult:
    """Public entry point: score, risk list and summary for one contract address."""
    return scan_address(
        address,
        config=config,
        retriever=retriever,
        completer=completer,
        use_ai=use_ai,
    ).result
