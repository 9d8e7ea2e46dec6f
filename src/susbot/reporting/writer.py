"""Output writer for JSON scan reports."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from susbot.constants.reporting import REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX
from susbot.model import ScanReport


def write_scan_report(path: Path, report: ScanReport, *, include_details: bool = False) -> None:
    """Write the scan result (and optionally its findings and metadata) as JSON.

    The report lands in a sibling temp file first and is renamed into place,
    so readers never see a half-written file.
    """
    payload = report.to_dict() if include_details else report.result.to_dict()
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=REPORT_TEMP_PREFIX,
        suffix=REPORT_TEMP_SUFFIX,
        delete=False,
    ) as handle:
        temp_path = Path(handle.name)
        try:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        except Exception:
            handle.close()
            with suppress(FileNotFoundError):
                temp_path.unlink()
            raise

    os.replace(temp_path, path)
