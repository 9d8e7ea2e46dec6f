"""Tests for CLI parser and main behavior."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from susbot.cli.main import build_parser, main
from susbot.exceptions import ConfigError, InvalidAddressError, UpstreamUnavailableError
from susbot.model import ScanReport

from ..conftest import ADDRESS


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_build_parser_accepts_scan_flags(tmp_path: Path) -> None:
    args = build_parser().parse_args(
        ["scan", ADDRESS, "--no-ai", "--json", "-o", str(tmp_path / "out.json"), "--fail-below", "70", "-v"]
    )

    assert args.command == "scan"
    assert args.address == ADDRESS
    assert args.no_ai is True
    assert args.json is True
    assert args.output == tmp_path / "out.json"
    assert args.fail_below == 70
    assert args.verbose is True


def test_version_flag_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert "susbot" in capsys.readouterr().out


def test_scan_prints_text_report(tx_origin_report: ScanReport, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("susbot.cli.main.scan_address", return_value=tx_origin_report) as scan:
        code = main(["scan", ADDRESS, "--no-color"])

    assert code == 0
    assert scan.call_args.args == (ADDRESS,)
    assert scan.call_args.kwargs["use_ai"] is True
    assert "Trust Score 76 / 100" in capsys.readouterr().out


def test_scan_no_ai_flag(tx_origin_report: ScanReport) -> None:
    with patch("susbot.cli.main.scan_address", return_value=tx_origin_report) as scan:
        main(["scan", ADDRESS, "--no-ai"])

    assert scan.call_args.kwargs["use_ai"] is False


def test_scan_json_output(tx_origin_report: ScanReport, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("susbot.cli.main.scan_address", return_value=tx_origin_report):
        code = main(["scan", ADDRESS, "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == tx_origin_report.result.to_dict()


def test_scan_writes_detailed_report(tmp_path: Path, tx_origin_report: ScanReport) -> None:
    out = tmp_path / "reports" / "scan.json"

    with patch("susbot.cli.main.scan_address", return_value=tx_origin_report):
        code = main(["scan", ADDRESS, "-o", str(out), "--no-color"])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["address"] == ADDRESS
    assert [finding["rule_id"] for finding in payload["findings"]] == ["tx-origin-auth", "outdated-compiler"]


def test_fail_below_threshold_exit_codes(tx_origin_report: ScanReport) -> None:
    with patch("susbot.cli.main.scan_address", return_value=tx_origin_report):
        assert main(["scan", ADDRESS, "--no-color", "--fail-below", "80"]) == 1
        assert main(["scan", ADDRESS, "--no-color", "--fail-below", "76"]) == 0


def test_fail_below_out_of_range_is_config_error(capsys: pytest.CaptureFixture[str]) -> None:
    with patch("susbot.cli.main.scan_address") as scan:
        code = main(["scan", ADDRESS, "--fail-below", "150"])

    assert code == 2
    scan.assert_not_called()
    assert "--fail-below" in capsys.readouterr().err


def test_invalid_address_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["scan", "0x1234"])

    assert code == 2
    assert "Invalid address" in capsys.readouterr().err


@pytest.mark.parametrize(
    ("error", "expected_code", "prefix"),
    [
        (InvalidAddressError("0x", "missing hex digits"), 2, "Invalid address"),
        (ConfigError("bad config"), 2, "Configuration error"),
        (UpstreamUnavailableError("retrieval", "down"), 1, "Scanner error"),
    ],
)
def test_scan_error_exit_codes(
    error: Exception,
    expected_code: int,
    prefix: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    with patch("susbot.cli.main.scan_address", side_effect=error):
        code = main(["scan", ADDRESS])

    assert code == expected_code
    assert capsys.readouterr().err.startswith(prefix)


def test_scan_with_broken_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "broken.yaml"
    config.write_text("timeout_seconds: -1\n", encoding="utf-8")

    with patch("susbot.cli.main.scan_address") as scan:
        code = main(["scan", ADDRESS, "-c", str(config)])

    assert code == 2
    scan.assert_not_called()
    assert "timeout_seconds" in capsys.readouterr().err


def test_validate_config_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "susbot.yaml"
    config.write_text("min_compiler_version: '0.8.19'\n", encoding="utf-8")

    assert main(["validate-config", "-c", str(config)]) == 0
    assert "Configuration is valid." in capsys.readouterr().out


def test_validate_config_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "susbot.yaml"
    config.write_text("detectors:\n  enabled: [not-a-detector]\n", encoding="utf-8")

    assert main(["validate-config", "-c", str(config)]) == 2
    assert "Unknown detector id" in capsys.readouterr().err
