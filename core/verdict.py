"""
    Verdict evaluation: turns collected facts into a readiness record.
    Pure functions only, no I/O.
"""
from core.models import (
    AssessmentRecord,
    Criteria,
    DiagnosticReport,
    RawFacts,
    RequirementProfile,
    Tier,
)

TIER_B_DATA_WIDTH = 64


def meets_version(value: float | None, minimum: float) -> bool:
    """
        Numeric version check.
        A value that could not be read as a number never meets the minimum.
    """
    if value is None:
        return False
    return value >= minimum


def diagnostic_met(report: DiagnosticReport | None, profile: RequirementProfile) -> bool:
    if profile.skip_diagnostics:
        return True
    if report is None:
        return False
    return (
        meets_version(report.interface_version, profile.min_interface_version)
        and meets_version(report.driver_model_version, profile.min_driver_model_version)
    )


def compute_criteria(
    facts: RawFacts,
    report: DiagnosticReport | None,
    profile: RequirementProfile,
) -> Criteria:
    return Criteria(
        clock_speed=facts.max_clock_mhz >= profile.min_clock_mhz,
        tier_a_memory=facts.total_memory_bytes >= profile.tier_a_memory_bytes,
        tier_b_memory=facts.total_memory_bytes >= profile.tier_b_memory_bytes,
        tier_a_disk=facts.free_disk_bytes >= profile.tier_a_disk_bytes,
        tier_b_disk=facts.free_disk_bytes >= profile.tier_b_disk_bytes,
        diagnostic=diagnostic_met(report, profile),
    )


def recommend_tier(criteria: Criteria, facts: RawFacts) -> tuple[bool, Tier]:
    ready = (
        criteria.clock_speed
        and criteria.tier_a_memory
        and criteria.tier_a_disk
        and criteria.diagnostic
    )
    if not ready:
        return False, "NOT_READY"
    if criteria.tier_b_memory and criteria.tier_b_disk and facts.data_width == TIER_B_DATA_WIDTH:
        return True, "TIER_B"
    return True, "TIER_A"


def evaluate(
    facts: RawFacts,
    report: DiagnosticReport | None,
    profile: RequirementProfile,
    diagnostic_error: str | None = None,
) -> AssessmentRecord:
    """
        Combine facts and an optional diagnostic report into a record.

        When the profile skips diagnostics the diagnostic criterion is met
        automatically, so readiness rests on clock, tier-A memory and tier-A disk.
    """
    criteria = compute_criteria(facts, report, profile)
    ready, tier = recommend_tier(criteria, facts)
    return AssessmentRecord(
        target=facts.target,
        facts=facts,
        diagnostic=report,
        criteria=criteria,
        ready=ready,
        tier=tier,
        diagnostic_skipped=profile.skip_diagnostics,
        diagnostic_error=diagnostic_error,
    )
