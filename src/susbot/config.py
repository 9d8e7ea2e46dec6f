"""Configuration loading and normalization for Susbot scans."""

from __future__ import annotations

import difflib
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from susbot.constants.config import (
    ALLOWED_CONFIG_KEYS,
    ALLOWED_DETECTOR_KEYS,
    ALLOWED_EXPLANATION_KEYS,
    ALLOWED_HOLDER_KEYS,
    ALLOWED_RETRIEVAL_KEYS,
    CONFIG_FILENAME,
    DEFAULT_CHAIN_ID,
    DEFAULT_CONCENTRATION_THRESHOLD_PERCENT,
    DEFAULT_EXPLANATION_BASE_URL,
    DEFAULT_EXPLANATION_MODEL,
    DEFAULT_MIN_COMPILER_VERSION,
    DEFAULT_RETRIEVAL_BASE_URL,
    DEFAULT_SUMMARY_MAX_CHARS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TOP_HOLDERS,
    ETHERSCAN_API_KEY_ENV,
    OPENAI_API_KEY_ENV,
)
from susbot.constants.detectors import DEFAULT_DETECTORS, VERSION_STRING_PATTERN
from susbot.constants.scoring import DEFAULT_SEVERITY_WEIGHTS, SEVERITY_ORDER
from susbot.exceptions import ConfigError
from susbot.types import Severity


@dataclass(frozen=True)
class SeverityWeights:
    """Per-severity score deductions."""

    critical: int = DEFAULT_SEVERITY_WEIGHTS["critical"]
    high: int = DEFAULT_SEVERITY_WEIGHTS["high"]
    medium: int = DEFAULT_SEVERITY_WEIGHTS["medium"]
    low: int = DEFAULT_SEVERITY_WEIGHTS["low"]
    info: int = DEFAULT_SEVERITY_WEIGHTS["info"]

    def weight_for(self, severity: Severity) -> int:
        """Return the deduction for one finding of *severity*."""
        return int(getattr(self, severity))


@dataclass(frozen=True)
class HolderConcentrationConfig:
    """Threshold for the holder distribution check."""

    top_n: int = DEFAULT_TOP_HOLDERS
    threshold_percent: float = DEFAULT_CONCENTRATION_THRESHOLD_PERCENT


@dataclass(frozen=True)
class DetectorConfig:
    """Detector enablement toggles."""

    enabled: tuple[str, ...] = ()
    disabled: tuple[str, ...] = ()


@dataclass(frozen=True)
class RetrievalConfig:
    """Settings for the contract source retrieval service."""

    base_url: str = DEFAULT_RETRIEVAL_BASE_URL
    chain_id: int = DEFAULT_CHAIN_ID
    fetch_holders: bool = True
    api_key: str = field(default="", repr=False)


@dataclass(frozen=True)
class ExplanationConfig:
    """Settings for the text-generation service."""

    base_url: str = DEFAULT_EXPLANATION_BASE_URL
    model: str = DEFAULT_EXPLANATION_MODEL
    api_key: str = field(default="", repr=False)


@dataclass(frozen=True)
class SusbotConfig:
    """Resolved scanner config, loaded once and never mutated."""

    min_compiler_version: str = DEFAULT_MIN_COMPILER_VERSION
    holder_concentration: HolderConcentrationConfig = HolderConcentrationConfig()
    severity_weights: SeverityWeights = SeverityWeights()
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    summary_max_chars: int = DEFAULT_SUMMARY_MAX_CHARS
    detectors: DetectorConfig = DetectorConfig()
    retrieval: RetrievalConfig = RetrievalConfig()
    explanation: ExplanationConfig = ExplanationConfig()

    @property
    def min_compiler_version_tuple(self) -> tuple[int, int, int]:
        """Minimum compiler version as a comparable tuple."""
        major, minor, patch = (int(part) for part in self.min_compiler_version.split("."))
        return major, minor, patch


def load_config(
    config_path: Path | None = None,
    *,
    root: Path | None = None,
    environ: dict[str, str] | None = None,
) -> SusbotConfig:
    """Load and validate scanner config from `susbot.yaml` or an explicit path.

    API keys are read from *environ* (defaults to ``os.environ``), never from
    the YAML file.
    """
    env = os.environ if environ is None else environ
    base = (root or Path.cwd()).resolve()
    path = config_path.resolve() if config_path else (base / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return _with_api_keys(SusbotConfig(), env)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    return _with_api_keys(parse_config_mapping(raw), env)


def parse_config_mapping(raw: dict[str, Any]) -> SusbotConfig:
    """Validate a raw config mapping and build a `SusbotConfig`."""
    _reject_unknown_keys(raw, ALLOWED_CONFIG_KEYS, "")

    min_version = raw.get("min_compiler_version", DEFAULT_MIN_COMPILER_VERSION)
    if not isinstance(min_version, str) or not VERSION_STRING_PATTERN.match(min_version.strip()):
        raise ConfigError("min_compiler_version must be a version string like '0.8.0'")

    holders_raw = _ensure_mapping(raw.get("holder_concentration"), "holder_concentration")
    _reject_unknown_keys(holders_raw, ALLOWED_HOLDER_KEYS, "holder_concentration.")
    top_n = holders_raw.get("top_n", DEFAULT_TOP_HOLDERS)
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n <= 0:
        raise ConfigError("holder_concentration.top_n must be a positive integer")
    threshold = holders_raw.get("threshold_percent", DEFAULT_CONCENTRATION_THRESHOLD_PERCENT)
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0 < threshold <= 100:
        raise ConfigError("holder_concentration.threshold_percent must be a number in (0, 100]")

    weights_raw = _ensure_mapping(raw.get("severity_weights"), "severity_weights")
    _reject_unknown_keys(weights_raw, frozenset(SEVERITY_ORDER), "severity_weights.")
    weights: dict[str, int] = {}
    for severity in SEVERITY_ORDER:
        value = weights_raw.get(severity, DEFAULT_SEVERITY_WEIGHTS[severity])
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"severity_weights.{severity} must be a non-negative integer")
        weights[severity] = value

    timeout = raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("timeout_seconds must be a positive number")

    summary_max_chars = raw.get("summary_max_chars", DEFAULT_SUMMARY_MAX_CHARS)
    if isinstance(summary_max_chars, bool) or not isinstance(summary_max_chars, int) or summary_max_chars <= 0:
        raise ConfigError("summary_max_chars must be a positive integer")

    detectors_raw = _ensure_mapping(raw.get("detectors"), "detectors")
    _reject_unknown_keys(detectors_raw, ALLOWED_DETECTOR_KEYS, "detectors.")
    enabled = tuple(_ensure_string_list(detectors_raw.get("enabled", []), "detectors.enabled"))
    disabled = tuple(_ensure_string_list(detectors_raw.get("disabled", []), "detectors.disabled"))
    for detector_id in (*enabled, *disabled):
        if detector_id not in DEFAULT_DETECTORS:
            raise ConfigError(f"Unknown detector id {detector_id!r}{_suggest(detector_id, DEFAULT_DETECTORS)}")

    retrieval_raw = _ensure_mapping(raw.get("retrieval"), "retrieval")
    _reject_unknown_keys(retrieval_raw, ALLOWED_RETRIEVAL_KEYS, "retrieval.")
    chain_id = retrieval_raw.get("chain_id", DEFAULT_CHAIN_ID)
    if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
        raise ConfigError("retrieval.chain_id must be a positive integer")
    fetch_holders = retrieval_raw.get("fetch_holders", True)
    if not isinstance(fetch_holders, bool):
        raise ConfigError("retrieval.fetch_holders must be a boolean")

    explanation_raw = _ensure_mapping(raw.get("explanation"), "explanation")
    _reject_unknown_keys(explanation_raw, ALLOWED_EXPLANATION_KEYS, "explanation.")

    return SusbotConfig(
        min_compiler_version=min_version.strip(),
        holder_concentration=HolderConcentrationConfig(top_n=top_n, threshold_percent=float(threshold)),
        severity_weights=SeverityWeights(**weights),
        timeout_seconds=float(timeout),
        summary_max_chars=summary_max_chars,
        detectors=DetectorConfig(enabled=enabled, disabled=disabled),
        retrieval=RetrievalConfig(
            base_url=_ensure_url(retrieval_raw.get("base_url", DEFAULT_RETRIEVAL_BASE_URL), "retrieval.base_url"),
            chain_id=chain_id,
            fetch_holders=fetch_holders,
        ),
        explanation=ExplanationConfig(
            base_url=_ensure_url(
                explanation_raw.get("base_url", DEFAULT_EXPLANATION_BASE_URL),
                "explanation.base_url",
            ),
            model=_ensure_string(explanation_raw.get("model", DEFAULT_EXPLANATION_MODEL), "explanation.model"),
        ),
    )


def effective_detector_ids(config: SusbotConfig) -> tuple[str, ...]:
    """Resolve enabled detectors with config overrides, keeping declaration order."""
    enabled = set(config.detectors.enabled or DEFAULT_DETECTORS)
    disabled = set(config.detectors.disabled)
    return tuple(detector_id for detector_id in DEFAULT_DETECTORS if detector_id in enabled - disabled)


def _with_api_keys(config: SusbotConfig, env: Any) -> SusbotConfig:
    return replace(
        config,
        retrieval=replace(config.retrieval, api_key=env.get(ETHERSCAN_API_KEY_ENV, "")),
        explanation=replace(config.explanation, api_key=env.get(OPENAI_API_KEY_ENV, "")),
    )


def _reject_unknown_keys(raw: dict[str, Any], allowed: frozenset[str], prefix: str) -> None:
    for key in raw:
        if key not in allowed:
            raise ConfigError(f"Unknown config key '{prefix}{key}'{_suggest(str(key), tuple(allowed))}")


def _suggest(value: str, choices: tuple[str, ...]) -> str:
    matches = difflib.get_close_matches(value, sorted(choices), n=1)
    return f" (did you mean '{matches[0]}'?)" if matches else ""


def _ensure_mapping(value: Any, key_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key_name} must be a mapping")
    return value


def _ensure_string(value: Any, key_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key_name} must be a non-empty string")
    return value.strip()


def _ensure_url(value: Any, key_name: str) -> str:
    url = _ensure_string(value, key_name)
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"{key_name} must be an http(s) URL")
    return url.rstrip("/")


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return [item.strip() for item in value if item.strip()]
