import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable

from core.models import AssessmentRecord

CSV_FIELDS = [
    "target",
    "ready",
    "tier",
    "os_caption",
    "data_width",
    "max_clock_mhz",
    "total_memory_bytes",
    "free_disk_bytes",
    "interface_version",
    "driver_model",
    "clock_speed",
    "tier_a_memory",
    "tier_b_memory",
    "tier_a_disk",
    "tier_b_disk",
    "diagnostic",
    "diagnostic_skipped",
    "diagnostic_error",
]


def record_to_dict(record: AssessmentRecord) -> dict[str, Any]:
    data = asdict(record)
    data["target"] = record.target.name
    data["facts"]["target"] = record.target.name
    return data


def record_to_row(record: AssessmentRecord) -> dict[str, Any]:
    """Flatten a record into one CSV row."""
    facts = record.facts
    report = record.diagnostic
    row = {
        "target": record.target.name,
        "ready": record.ready,
        "tier": record.tier,
        "os_caption": facts.os_caption,
        "data_width": facts.data_width,
        "max_clock_mhz": facts.max_clock_mhz,
        "total_memory_bytes": facts.total_memory_bytes,
        "free_disk_bytes": facts.free_disk_bytes,
        "interface_version": report.interface_version_text if report else "",
        "driver_model": report.driver_model_text if report else "",
        "diagnostic_skipped": record.diagnostic_skipped,
        "diagnostic_error": record.diagnostic_error or "",
    }
    row.update(asdict(record.criteria))
    return row


def write_json_report(records: Iterable[AssessmentRecord], out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8") as f:
        json.dump([record_to_dict(r) for r in records], f, indent=2, ensure_ascii=False)

    return out_path


def write_csv_report(records: Iterable[AssessmentRecord], out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))

    return out_path


def write_report(records: Iterable[AssessmentRecord], out_path: str | Path) -> Path:
    """Pick the writer from the file suffix (.csv, anything else is JSON)."""
    if Path(out_path).suffix.lower() == ".csv":
        return write_csv_report(records, out_path)
    return write_json_report(records, out_path)
