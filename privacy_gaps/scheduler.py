"""Deterministic daily privacy gap schedules."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from privacy_gaps.config import (
    DEFAULT_PRIVACY_GAP_CONFIG,
    SCHEDULE_TTL_HOURS,
    PrivacyGapConfig,
    validate_config,
)
from privacy_gaps.distributor import distribute_gap_offsets, sample_durations, select_gap_count
from privacy_gaps.rng import create_seeded_random
from privacy_gaps.seed import DateLike, build_seed
from privacy_gaps.utils import iso_z, now_utc, parse_iso_ts, to_utc, to_utc_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledGap:
    """One window during which monitoring is paused."""
    start_time: datetime
    end_time: datetime
    duration_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": iso_z(self.start_time),
            "endTime": iso_z(self.end_time),
            "durationMs": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduledGap":
        start = parse_iso_ts(data["startTime"])
        end = parse_iso_ts(data["endTime"])
        duration_ms = int(data["durationMs"])
        if duration_ms < 0 or end - start != timedelta(milliseconds=duration_ms):
            raise ValueError("durationMs must equal endTime - startTime")
        return cls(start_time=start, end_time=end, duration_ms=duration_ms)


@dataclass(frozen=True)
class PrivacyGapSchedule:
    """A subject's gaps for one UTC calendar day.

    ``generated_at`` and ``expires_at`` are cache stamps and take no part in
    equality: two generations from the same inputs compare equal.
    """
    subject_id: str
    date: date
    gaps: Tuple[ScheduledGap, ...]
    generated_at: datetime = field(compare=False)
    expires_at: datetime = field(compare=False)

    @property
    def date_string(self) -> str:
        return self.date.isoformat()

    def is_expired(self, at: Optional[datetime] = None) -> bool:
        """Advisory staleness check for callers holding a cached copy."""
        return to_utc(at or now_utc()) >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subjectId": self.subject_id,
            "date": self.date_string,
            "gaps": [gap.to_dict() for gap in self.gaps],
            "generatedAt": iso_z(self.generated_at),
            "expiresAt": iso_z(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PrivacyGapSchedule":
        """Rebuild a schedule from its ``to_dict`` form, e.g. out of a cache."""
        subject_id = data["subjectId"]
        if not subject_id:
            raise ValueError("subjectId is required")
        gaps = tuple(ScheduledGap.from_dict(item) for item in data.get("gaps", []))
        return cls(
            subject_id=subject_id,
            date=to_utc_date(data["date"]),
            gaps=gaps,
            generated_at=parse_iso_ts(data["generatedAt"]),
            expires_at=parse_iso_ts(data["expiresAt"]),
        )


def window_start(day: date, config: PrivacyGapConfig) -> datetime:
    """Instant the waking-hours window opens on ``day`` (UTC)."""
    return datetime.combine(day, time(hour=config.waking_hours_start), tzinfo=timezone.utc)


def assemble_schedule(
    subject_id: str,
    day: date,
    offsets_minutes: List[int],
    durations_ms: List[int],
    config: PrivacyGapConfig,
    now: datetime,
) -> PrivacyGapSchedule:
    """Turn window-relative offsets and durations into an absolute schedule."""
    anchor = window_start(day, config)
    gaps = []
    for offset, duration_ms in zip(offsets_minutes, durations_ms):
        start = anchor + timedelta(minutes=offset)
        gaps.append(
            ScheduledGap(
                start_time=start,
                end_time=start + timedelta(milliseconds=duration_ms),
                duration_ms=duration_ms,
            )
        )
    generated_at = to_utc(now)
    return PrivacyGapSchedule(
        subject_id=subject_id,
        date=day,
        gaps=tuple(gaps),
        generated_at=generated_at,
        expires_at=generated_at + timedelta(hours=SCHEDULE_TTL_HOURS),
    )


def generate_daily_gap_schedule(
    subject_id: str,
    day: DateLike,
    config: PrivacyGapConfig = DEFAULT_PRIVACY_GAP_CONFIG,
    now: Optional[datetime] = None,
) -> PrivacyGapSchedule:
    """Generate the privacy gap schedule for ``subject_id`` on ``day``.

    The result depends only on (subject_id, day, config); any caller that
    runs this with the same inputs gets the same gaps.

    Args:
        subject_id: Identifier of the monitored subject
        day: UTC calendar day as date, datetime or YYYY-MM-DD string
        config: Gap bounds; validated before any draw is taken
        now: Stamp for generated_at (defaults to the current UTC time)

    Returns:
        PrivacyGapSchedule with gaps sorted by start time

    Raises:
        ConfigurationError: If the config violates any of its bounds
    """
    validate_config(config)
    calendar_day = to_utc_date(day)
    rand = create_seeded_random(build_seed(subject_id, calendar_day))

    count = select_gap_count(rand, config.min_daily_gaps, config.max_daily_gaps)
    offsets = distribute_gap_offsets(
        rand,
        count,
        config.window_minutes,
        config.spacing_minutes,
        config.footprint_minutes,
    )
    durations = sample_durations(rand, len(offsets), config.min_gap_duration_ms, config.max_gap_duration_ms)

    schedule = assemble_schedule(subject_id, calendar_day, offsets, durations, config, now or now_utc())
    logger.debug(
        "Generated %d privacy gaps for subject %s on %s",
        len(schedule.gaps),
        subject_id,
        schedule.date_string,
    )
    return schedule
