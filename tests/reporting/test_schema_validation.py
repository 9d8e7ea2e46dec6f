"""Tests for JSON Schema validation of scan result outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import jsonschema
import pytest

from susbot.model import ScanReport
from susbot.reporting.writer import write_scan_report

SCHEMAS_DIR: Path = Path(__file__).resolve().parents[2] / "schemas"
SCAN_RESULT_SCHEMA_PATH: Path = SCHEMAS_DIR / "scan_result.schema.json"


@pytest.fixture()
def scan_result_schema() -> dict[str, Any]:
    """Load the scan result JSON Schema."""
    return json.loads(SCAN_RESULT_SCHEMA_PATH.read_text(encoding="utf-8"))


def test_scan_result_schema_is_valid_json_schema(scan_result_schema: dict[str, Any]) -> None:
    jsonschema.Draft202012Validator.check_schema(scan_result_schema)


def test_compact_result_validates(scan_result_schema: dict[str, Any], tx_origin_report: ScanReport) -> None:
    jsonschema.validate(tx_origin_report.result.to_dict(), scan_result_schema)


def test_detailed_report_validates(scan_result_schema: dict[str, Any], tx_origin_report: ScanReport) -> None:
    jsonschema.validate(tx_origin_report.to_dict(), scan_result_schema)


def test_unavailable_report_validates(scan_result_schema: dict[str, Any], unavailable_report: ScanReport) -> None:
    payload = unavailable_report.to_dict()

    jsonschema.validate(payload, scan_result_schema)
    assert payload["retrieval_status"] == "unavailable"


def test_schema_rejects_out_of_range_score(scan_result_schema: dict[str, Any], tx_origin_report: ScanReport) -> None:
    payload = tx_origin_report.result.to_dict()
    payload["score"] = 101

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(payload, scan_result_schema)


def test_written_report_validates(
    tmp_path: Path,
    scan_result_schema: dict[str, Any],
    tx_origin_report: ScanReport,
) -> None:
    out = tmp_path / "reports" / "scan.json"

    write_scan_report(out, tx_origin_report, include_details=True)

    payload = json.loads(out.read_text(encoding="utf-8"))
    jsonschema.validate(payload, scan_result_schema)
    assert payload["score"] == 76
    assert [path.name for path in out.parent.iterdir()] == ["scan.json"]


def test_written_compact_report_has_only_result_keys(tmp_path: Path, tx_origin_report: ScanReport) -> None:
    out = tmp_path / "scan.json"

    write_scan_report(out, tx_origin_report)

    assert set(json.loads(out.read_text(encoding="utf-8"))) == {"score", "risks", "summary"}


def test_failed_write_leaves_no_partial_files(tmp_path: Path, tx_origin_report: ScanReport) -> None:
    out = tmp_path / "scan.json"
    out.write_text("previous\n", encoding="utf-8")

    with patch("susbot.reporting.writer.json.dump", side_effect=TypeError("not serializable")):
        with pytest.raises(TypeError):
            write_scan_report(out, tx_origin_report)

    assert [path.name for path in tmp_path.iterdir()] == ["scan.json"]
    assert out.read_text(encoding="utf-8") == "previous\n"
