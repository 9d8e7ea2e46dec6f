"""Etherscan-compatible contract source and holder retrieval."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from susbot.config import RetrievalConfig
from susbot.constants.retrieval import (
    DOUBLE_BRACE_PREFIX,
    DOUBLE_BRACE_SUFFIX,
    ETHERSCAN_OK_STATUS,
    SOURCE_FILE_HEADER,
)
from susbot.exceptions import UpstreamUnavailableError
from susbot.model import HolderShare, SourceBundle

logger = logging.getLogger(__name__)

SERVICE_NAME: str = "retrieval"


class EtherscanRetriever:
    """Fetch verified source, contract name and top holders for an address."""

    def __init__(
        self,
        settings: RetrievalConfig,
        *,
        timeout: float,
        top_n: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._top_n = top_n
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> EtherscanRetriever:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, address: str) -> SourceBundle:
        """Retrieve the source bundle for *address*."""
        result = self._get({"module": "contract", "action": "getsourcecode", "address": address})
        if not isinstance(result, list) or not result or not isinstance(result[0], dict):
            raise UpstreamUnavailableError(SERVICE_NAME, "getsourcecode returned no result")

        entry = result[0]
        raw_source = entry.get("SourceCode") or ""
        if not isinstance(raw_source, str):
            raise UpstreamUnavailableError(SERVICE_NAME, "SourceCode is not a string")
        contract_name = entry.get("ContractName") or ""
        source_text = extract_source_text(raw_source)

        holders: tuple[HolderShare, ...] = ()
        if self._settings.fetch_holders and source_text.strip():
            holders = self._fetch_holders(address)

        return SourceBundle.from_retrieval(
            address=address,
            source_text=source_text,
            is_verified=bool(raw_source.strip()),
            holders=holders,
            contract_name=str(contract_name),
        )

    def _fetch_holders(self, address: str) -> tuple[HolderShare, ...]:
        try:
            supply = self._get({"module": "stats", "action": "tokensupply", "contractaddress": address})
            holders = self._get(
                {
                    "module": "token",
                    "action": "tokenholderlist",
                    "contractaddress": address,
                    "page": 1,
                    "offset": self._top_n,
                }
            )
        except UpstreamUnavailableError as exc:
            logger.warning("Holder distribution unavailable for %s: %s", address, exc)
            return ()
        return holder_shares(holders, supply)

    def _get(self, params: dict[str, Any]) -> Any:
        query = {"chainid": self._settings.chain_id, **params, "apikey": self._settings.api_key}
        try:
            response = self._client.get(self._settings.base_url, params=query)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(SERVICE_NAME, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailableError(SERVICE_NAME, f"invalid JSON response: {exc}") from exc

        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(SERVICE_NAME, "response is not a JSON object")
        if payload.get("status") != ETHERSCAN_OK_STATUS:
            detail = payload.get("result") or payload.get("message") or "unknown error"
            raise UpstreamUnavailableError(SERVICE_NAME, f"API error: {detail}")
        return payload.get("result")


def extract_source_text(raw_source: str) -> str:
    """Flatten Etherscan's SourceCode field into one Solidity text.

    The field holds plain Solidity, a JSON object mapping paths to
    ``{"content": ...}``, or standard-json-input wrapped in an extra pair of
    braces.
    """
    stripped = raw_source.strip()
    if stripped.startswith(DOUBLE_BRACE_PREFIX) and stripped.endswith(DOUBLE_BRACE_SUFFIX):
        flattened = _flatten_sources(stripped[1:-1])
        if flattened is not None:
            return flattened
    if stripped.startswith("{"):
        flattened = _flatten_sources(stripped)
        if flattened is not None:
            return flattened
    return raw_source


def holder_shares(raw_holders: Any, raw_supply: Any) -> tuple[HolderShare, ...]:
    """Convert holder quantities into percentages of total supply."""
    try:
        supply = int(raw_supply)
    except (TypeError, ValueError):
        logger.warning("Ignoring holder data: unparseable token supply %r", raw_supply)
        return ()
    if supply <= 0 or not isinstance(raw_holders, list):
        return ()

    shares: list[HolderShare] = []
    for entry in raw_holders:
        if not isinstance(entry, dict):
            continue
        try:
            quantity = int(entry.get("TokenHolderQuantity", 0))
        except (TypeError, ValueError):
            continue
        shares.append(
            HolderShare(
                holder=str(entry.get("TokenHolderAddress", "")),
                percent=quantity / supply * 100,
            )
        )
    return tuple(shares)


def _flatten_sources(blob: str) -> str | None:
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None

    files = payload.get("sources", payload)
    if not isinstance(files, dict):
        return None

    parts = [
        f"{SOURCE_FILE_HEADER.format(path=path)}\n{entry['content']}"
        for path, entry in files.items()
        if isinstance(entry, dict) and isinstance(entry.get("content"), str)
    ]
    return "\n\n".join(parts) if parts else None
