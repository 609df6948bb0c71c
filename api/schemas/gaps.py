"""Privacy gap Pydantic models.

Fields are camelCase on the wire, matching ``PrivacyGapSchedule.to_dict``
and policy files. Snake_case names are accepted on input too.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel

from privacy_gaps import PrivacyGapConfig, PrivacyGapSchedule, ScheduledGap
from privacy_gaps.utils import iso_z


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Gap(CamelModel):
    """A scheduled privacy gap."""

    start_time: str
    end_time: str
    duration_ms: int = Field(ge=0)

    @classmethod
    def from_gap(cls, gap: ScheduledGap) -> "Gap":
        return cls(
            start_time=iso_z(gap.start_time),
            end_time=iso_z(gap.end_time),
            duration_ms=gap.duration_ms,
        )


class GapSchedule(CamelModel):
    """A subject's privacy gaps for one UTC day."""

    subject_id: str = Field(min_length=1)
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    gaps: List[Gap] = Field(default_factory=list)
    generated_at: str
    expires_at: str

    @classmethod
    def from_schedule(cls, schedule: PrivacyGapSchedule) -> "GapSchedule":
        return cls(
            subject_id=schedule.subject_id,
            date=schedule.date_string,
            gaps=[Gap.from_gap(g) for g in schedule.gaps],
            generated_at=iso_z(schedule.generated_at),
            expires_at=iso_z(schedule.expires_at),
        )


class GapConfig(CamelModel):
    """Gap bounds override. Omitted fields keep their defaults.

    Values are taken as given: ``"3"`` or ``4.0`` for a count is rejected
    rather than coerced.
    """

    enabled: Optional[StrictBool] = None
    waking_hours_start: Optional[StrictInt] = None
    waking_hours_end: Optional[StrictInt] = None
    min_daily_gaps: Optional[StrictInt] = None
    max_daily_gaps: Optional[StrictInt] = None
    min_gap_duration_ms: Optional[StrictInt] = None
    max_gap_duration_ms: Optional[StrictInt] = None
    min_gap_spacing_ms: Optional[StrictInt] = None

    def overrides(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value is not None}

    @classmethod
    def from_config(cls, config: PrivacyGapConfig) -> "GapConfig":
        return cls(
            enabled=config.enabled,
            waking_hours_start=config.waking_hours_start,
            waking_hours_end=config.waking_hours_end,
            min_daily_gaps=config.min_daily_gaps,
            max_daily_gaps=config.max_daily_gaps,
            min_gap_duration_ms=config.min_gap_duration_ms,
            max_gap_duration_ms=config.max_gap_duration_ms,
            min_gap_spacing_ms=config.min_gap_spacing_ms,
        )


class GenerateRequest(CamelModel):
    """Generate a schedule with an explicit config."""

    subject_id: str = Field(min_length=1)
    date: str
    config: Optional[GapConfig] = None


class GapStatus(CamelModel):
    """Whether a subject is inside a privacy gap at a given instant."""

    subject_id: str
    at: str
    date: str
    enabled: bool
    in_gap: bool
    current_gap: Optional[Gap] = None
    ms_until_next_gap: Optional[int] = None
