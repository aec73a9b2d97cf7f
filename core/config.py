from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.models import GIB, RequirementProfile
from diagnostics.invoker import (
    DEFAULT_POLL_INTERVAL_S,
    DEFAULT_REMOTE_DIRECTORY,
    DEFAULT_TIMEOUT_S,
    DEFAULT_TOOL,
)


class ProfileConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min_clock_mhz: int = Field(1000, ge=0)
    tier_a_memory_gb: float = Field(1, ge=0)
    tier_b_memory_gb: float = Field(2, ge=0)
    tier_a_disk_gb: float = Field(16, ge=0)
    tier_b_disk_gb: float = Field(20, ge=0)
    min_interface_version: float = 9
    min_driver_model_version: float = 1.0
    skip_diagnostics: bool = False

    @model_validator(mode="after")
    def tier_b_not_below_tier_a(self) -> "ProfileConfig":
        if self.tier_b_memory_gb < self.tier_a_memory_gb:
            raise ValueError("tier_b_memory_gb must be >= tier_a_memory_gb")
        if self.tier_b_disk_gb < self.tier_a_disk_gb:
            raise ValueError("tier_b_disk_gb must be >= tier_a_disk_gb")
        return self

    def to_profile(self, skip_diagnostics: bool | None = None) -> RequirementProfile:
        skip = self.skip_diagnostics if skip_diagnostics is None else skip_diagnostics
        return RequirementProfile(
            min_clock_mhz=self.min_clock_mhz,
            tier_a_memory_bytes=int(self.tier_a_memory_gb * GIB),
            tier_b_memory_bytes=int(self.tier_b_memory_gb * GIB),
            tier_a_disk_bytes=int(self.tier_a_disk_gb * GIB),
            tier_b_disk_bytes=int(self.tier_b_disk_gb * GIB),
            min_interface_version=self.min_interface_version,
            min_driver_model_version=self.min_driver_model_version,
            skip_diagnostics=skip,
        )


class DiagnosticsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    tool: str = DEFAULT_TOOL
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_S, gt=0)
    poll_interval_seconds: float = Field(DEFAULT_POLL_INTERVAL_S, gt=0)
    remote_directory: str = DEFAULT_REMOTE_DIRECTORY
    share: str | None = None

    @model_validator(mode="after")
    def poll_within_timeout(self) -> "DiagnosticsConfig":
        if self.poll_interval_seconds > self.timeout_seconds:
            raise ValueError("poll_interval_seconds must not exceed timeout_seconds")
        return self


class AssessmentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    targets: list[str] = []
    parallel: int = Field(4, ge=1, le=256)
    profile: ProfileConfig = ProfileConfig()
    diagnostics: DiagnosticsConfig = DiagnosticsConfig()


def load_config(path: Path) -> AssessmentConfig:
    with open(path) as f:
        raw = yaml.safe_load(f)
    return AssessmentConfig.model_validate(raw or {})
