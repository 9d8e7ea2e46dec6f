"""Shared pytest fixtures for repository-local test data and fake collaborators."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from susbot.config import SusbotConfig
from susbot.model import HolderShare, ScanReport, SourceBundle
from susbot.scanner.orchestrator import ScanOrchestrator

ADDRESS: str = "0x5a0b54d5dc17e0aadc383d2db43b0a0d3e029c4c"


class FakeRetriever:
    """Retriever returning a fixed bundle, or raising a fixed error."""

    def __init__(self, bundle: SourceBundle | None = None, error: Exception | None = None) -> None:
        self.bundle = bundle
        self.error = error
        self.calls: list[str] = []

    def fetch(self, address: str) -> SourceBundle:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        if self.bundle is None:
            return SourceBundle.unavailable(address)
        return SourceBundle.from_retrieval(
            address=address,
            source_text=self.bundle.source_text,
            is_verified=self.bundle.is_verified,
            holders=self.bundle.holders,
            contract_name=self.bundle.contract_name,
        )


class FakeCompleter:
    """Completer returning a fixed reply, or raising a fixed error."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Return root directory for test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def contract_source(fixtures_root: Path) -> Callable[[str], str]:
    """Return a loader for Solidity fixture files by stem."""

    def _load(name: str) -> str:
        return (fixtures_root / "contracts" / f"{name}.sol").read_text(encoding="utf-8")

    return _load


@pytest.fixture()
def make_bundle() -> Callable[..., SourceBundle]:
    """Return a factory for source bundles at the shared test address."""

    def _make(
        source_text: str,
        *,
        is_verified: bool = True,
        holders: tuple[HolderShare, ...] = (),
        contract_name: str = "",
    ) -> SourceBundle:
        return SourceBundle.from_retrieval(
            address=ADDRESS,
            source_text=source_text,
            is_verified=is_verified,
            holders=holders,
            contract_name=contract_name,
        )

    return _make


@pytest.fixture()
def tx_origin_report(contract_source: Callable[[str], str], make_bundle: Callable[..., SourceBundle]) -> ScanReport:
    """Fallback-summary report for the tx.origin wallet fixture."""
    retriever = FakeRetriever(make_bundle(contract_source("tx_origin_wallet"), contract_name="Wallet"))
    return ScanOrchestrator(SusbotConfig(), retriever=retriever).scan(ADDRESS)


@pytest.fixture()
def unavailable_report() -> ScanReport:
    """Report for an address whose source could not be retrieved."""
    return ScanOrchestrator(SusbotConfig(), retriever=FakeRetriever()).scan(ADDRESS)
