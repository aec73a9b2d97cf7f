# core/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal

Tier = Literal["NOT_READY", "TIER_A", "TIER_B"]

GIB = 1024 ** 3


@dataclass(frozen=True)
class Target:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RequirementProfile:
    """
        Thresholds a host is measured against.
        Shared read-only by every per-host pipeline in a run.
    """
    min_clock_mhz: int = 1000
    tier_a_memory_bytes: int = 1 * GIB
    tier_b_memory_bytes: int = 2 * GIB
    tier_a_disk_bytes: int = 16 * GIB
    tier_b_disk_bytes: int = 20 * GIB
    min_interface_version: float = 9.0
    min_driver_model_version: float = 1.0
    skip_diagnostics: bool = False


@dataclass(frozen=True)
class RawFacts:
    target: Target
    address_width: int
    data_width: int
    max_clock_mhz: int
    total_memory_bytes: int
    free_disk_bytes: int
    os_caption: str = ""
    system_drive: str = "C:"


@dataclass(frozen=True)
class DiagnosticReport:
    """
        Capability fields pulled out of the diagnostic tool's report.

        The raw text is kept as reported. The numeric views are None when the
        text is not a number, which the evaluator reads as "not met".
    """
    interface_version_text: str
    driver_model_text: str
    interface_version: float | None
    driver_model_version: float | None


@dataclass(frozen=True)
class Criteria:
    clock_speed: bool
    tier_a_memory: bool
    tier_b_memory: bool
    tier_a_disk: bool
    tier_b_disk: bool
    diagnostic: bool


@dataclass(frozen=True)
class AssessmentRecord:
    target: Target
    facts: RawFacts
    diagnostic: DiagnosticReport | None
    criteria: Criteria
    ready: bool
    tier: Tier
    diagnostic_skipped: bool = False
    diagnostic_error: str | None = None
