"""Tests for config loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from susbot.config import (
    DetectorConfig,
    SeverityWeights,
    SusbotConfig,
    effective_detector_ids,
    load_config,
    parse_config_mapping,
)
from susbot.constants.detectors import DEFAULT_DETECTORS
from susbot.exceptions import ConfigError


def test_missing_config_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(root=tmp_path, environ={})

    assert config == SusbotConfig()
    assert config.min_compiler_version_tuple == (0, 8, 0)


def test_api_keys_come_from_environment(tmp_path: Path) -> None:
    config = load_config(
        root=tmp_path,
        environ={"ETHERSCAN_API_KEY": "scan-key", "OPENAI_API_KEY": "sk-secret"},
    )

    assert config.retrieval.api_key == "scan-key"
    assert config.explanation.api_key == "sk-secret"
    assert "sk-secret" not in repr(config)
    assert "scan-key" not in repr(config)


def test_full_config_file_is_parsed(tmp_path: Path) -> None:
    (tmp_path / "susbot.yaml").write_text(
        """
min_compiler_version: "0.8.19"
holder_concentration:
  top_n: 5
  threshold_percent: 40
severity_weights:
  critical: 50
  info: 1
timeout_seconds: 3
summary_max_chars: 500
detectors:
  disabled:
    - inline-assembly
retrieval:
  base_url: https://api.example.test/api/
  chain_id: 137
  fetch_holders: false
explanation:
  model: local-model
""",
        encoding="utf-8",
    )

    config = load_config(root=tmp_path, environ={})

    assert config.min_compiler_version == "0.8.19"
    assert config.holder_concentration.top_n == 5
    assert config.holder_concentration.threshold_percent == 40.0
    assert config.severity_weights == SeverityWeights(critical=50, high=20, medium=10, low=4, info=1)
    assert config.timeout_seconds == 3.0
    assert config.summary_max_chars == 500
    assert config.detectors.disabled == ("inline-assembly",)
    assert config.retrieval.base_url == "https://api.example.test/api"
    assert config.retrieval.chain_id == 137
    assert config.retrieval.fetch_holders is False
    assert config.explanation.model == "local-model"


def test_explicit_missing_config_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml", environ={})


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "susbot.yaml"
    path.write_text("detectors: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path, environ={})


def test_non_mapping_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "susbot.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(path, environ={})


def test_empty_yaml_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "susbot.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path, environ={}) == SusbotConfig()


def test_unknown_key_suggests_closest_match() -> None:
    with pytest.raises(ConfigError, match="did you mean 'min_compiler_version'"):
        parse_config_mapping({"min_compiler_versoin": "0.8.0"})


def test_unknown_nested_key_is_rejected() -> None:
    with pytest.raises(ConfigError, match="holder_concentration.top"):
        parse_config_mapping({"holder_concentration": {"top": 3}})


def test_unknown_detector_id_is_rejected() -> None:
    with pytest.raises(ConfigError, match="did you mean 'reentrancy'"):
        parse_config_mapping({"detectors": {"disabled": ["reentrancy-check"]}})


@pytest.mark.parametrize(
    "raw",
    [
        {"min_compiler_version": "0.8"},
        {"min_compiler_version": 8},
        {"holder_concentration": {"top_n": 0}},
        {"holder_concentration": {"threshold_percent": 150}},
        {"holder_concentration": {"threshold_percent": True}},
        {"severity_weights": {"high": -1}},
        {"severity_weights": {"extreme": 5}},
        {"timeout_seconds": 0},
        {"summary_max_chars": "long"},
        {"detectors": {"enabled": "reentrancy"}},
        {"retrieval": {"base_url": "ftp://example.test"}},
        {"retrieval": {"chain_id": "1"}},
        {"retrieval": {"fetch_holders": "yes"}},
        {"explanation": {"model": ""}},
        {"explanation": "gpt"},
    ],
)
def test_invalid_values_raise(raw: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        parse_config_mapping(raw)


def test_effective_detector_ids_default_to_all() -> None:
    assert effective_detector_ids(SusbotConfig()) == DEFAULT_DETECTORS


def test_effective_detector_ids_keep_declaration_order() -> None:
    config = SusbotConfig(
        detectors=DetectorConfig(
            enabled=("outdated-compiler", "reentrancy", "self-destruct"),
            disabled=("reentrancy",),
        )
    )

    assert effective_detector_ids(config) == ("self-destruct", "outdated-compiler")
