"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "susbot.yaml"

DEFAULT_MIN_COMPILER_VERSION: str = "0.8.0"
DEFAULT_TOP_HOLDERS: int = 10
DEFAULT_CONCENTRATION_THRESHOLD_PERCENT: float = 50.0
DEFAULT_TIMEOUT_SECONDS: float = 10.0
DEFAULT_SUMMARY_MAX_CHARS: int = 2000

DEFAULT_RETRIEVAL_BASE_URL: str = "https://api.etherscan.io/v2/api"
DEFAULT_CHAIN_ID: int = 1
DEFAULT_EXPLANATION_BASE_URL: str = "https://api.openai.com/v1"
DEFAULT_EXPLANATION_MODEL: str = "gpt-4o-mini"

ETHERSCAN_API_KEY_ENV: str = "ETHERSCAN_API_KEY"
OPENAI_API_KEY_ENV: str = "OPENAI_API_KEY"

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "min_compiler_version",
        "holder_concentration",
        "severity_weights",
        "timeout_seconds",
        "summary_max_chars",
        "detectors",
        "retrieval",
        "explanation",
    }
)
ALLOWED_HOLDER_KEYS: frozenset[str] = frozenset({"top_n", "threshold_percent"})
ALLOWED_DETECTOR_KEYS: frozenset[str] = frozenset({"enabled", "disabled"})
ALLOWED_RETRIEVAL_KEYS: frozenset[str] = frozenset({"base_url", "chain_id", "fetch_holders"})
ALLOWED_EXPLANATION_KEYS: frozenset[str] = frozenset({"base_url", "model"})
