"""
    Report formatting functions
"""
from core.errors import TargetError
from core.models import GIB, AssessmentRecord, Target

COLUMNS = ("TARGET", "READY", "TIER", "CLOCK", "MEMORY", "FREE DISK", "BITS", "DIAGNOSTIC")


def _gib(value: int) -> str:
    return f"{value / GIB:.1f} GiB"


def _diagnostic_cell(record: AssessmentRecord) -> str:
    if record.diagnostic_skipped:
        return "skipped"
    if record.diagnostic_error:
        return f"unavailable ({record.diagnostic_error})"
    report = record.diagnostic
    status = "ok" if record.criteria.diagnostic else "not met"
    return f"{status} ({report.interface_version_text}, {report.driver_model_text})"


def record_cells(record: AssessmentRecord) -> tuple[str, ...]:
    facts = record.facts
    return (
        record.target.name,
        "yes" if record.ready else "no",
        record.tier,
        f"{facts.max_clock_mhz} MHz",
        _gib(facts.total_memory_bytes),
        _gib(facts.free_disk_bytes),
        str(facts.data_width),
        _diagnostic_cell(record),
    )


def format_table(records: list[AssessmentRecord]) -> str:
    rows = [COLUMNS] + [record_cells(r) for r in records]
    widths = [max(len(row[i]) for row in rows) for i in range(len(COLUMNS))]
    lines = []
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines)


def format_skips(skipped: list[tuple[Target, TargetError]]) -> str:
    lines = ["Skipped:"]
    for target, error in skipped:
        lines.append(f"  {target.name}: {type(error).__name__}: {error}")
    return "\n".join(lines)
