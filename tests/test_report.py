import csv
import json

from core.errors import Unreachable
from core.models import DiagnosticReport, RequirementProfile, Target
from core.report import CSV_FIELDS, write_csv_report, write_json_report, write_report
from core.verdict import evaluate
from reports.formatter import format_skips, format_table


def _records(make_facts):
    report = DiagnosticReport("DirectX 11", "WDDM 1.2", 11.0, 1.2)
    return [
        evaluate(make_facts(), report, RequirementProfile()),
        evaluate(
            make_facts(target=Target("ws02"), max_clock_mhz=800),
            None,
            RequirementProfile(),
            diagnostic_error="InvocationTimeout",
        ),
    ]


def test_json_report(tmp_path, make_facts):
    out = write_json_report(_records(make_facts), tmp_path / "out" / "report.json")

    data = json.loads(out.read_text())
    assert [d["target"] for d in data] == ["ws01", "ws02"]
    assert data[0]["tier"] == "TIER_B"
    assert data[0]["facts"]["target"] == "ws01"
    assert data[0]["diagnostic"]["driver_model_version"] == 1.2
    assert data[1]["diagnostic"] is None
    assert data[1]["diagnostic_error"] == "InvocationTimeout"
    assert data[1]["criteria"]["clock_speed"] is False


def test_csv_report(tmp_path, make_facts):
    out = write_csv_report(_records(make_facts), tmp_path / "report.csv")

    with out.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == CSV_FIELDS
    assert rows[0]["tier"] == "TIER_B"
    assert rows[0]["interface_version"] == "DirectX 11"
    assert rows[1]["ready"] == "False"
    assert rows[1]["driver_model"] == ""
    assert rows[1]["diagnostic_error"] == "InvocationTimeout"


def test_write_report_picks_format_from_suffix(tmp_path, make_facts):
    records = _records(make_facts)
    assert write_report(records, tmp_path / "r.CSV").read_text().startswith("target,ready")
    assert write_report(records, tmp_path / "r.json").read_text().startswith("[")


def test_format_table(make_facts):
    text = format_table(_records(make_facts))
    lines = text.splitlines()

    assert lines[0].split()[0] == "TARGET"
    assert "ws01" in lines[1] and "TIER_B" in lines[1] and "2.0 GiB" in lines[1]
    assert "ok (DirectX 11, WDDM 1.2)" in lines[1]
    assert "unavailable (InvocationTimeout)" in lines[2]


def test_format_table_skipped_diagnostic(make_facts):
    record = evaluate(make_facts(), None, RequirementProfile(skip_diagnostics=True))
    assert format_table([record]).splitlines()[1].endswith("skipped")


def test_format_skips():
    text = format_skips([(Target("ws09"), Unreachable("ws09"))])
    assert text.splitlines()[1].startswith("  ws09: Unreachable: ws09:")
