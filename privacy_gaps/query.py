"""Lookups over an assembled schedule. All gaps are half-open: [start, end)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from privacy_gaps.scheduler import PrivacyGapSchedule, ScheduledGap
from privacy_gaps.utils import Timestamp, to_utc


@dataclass
class ScheduleStats:
    gap_count: int
    total_gap_ms: int
    average_gap_ms: float


def get_current_gap(schedule: PrivacyGapSchedule, timestamp: Timestamp) -> Optional[ScheduledGap]:
    """Gap containing ``timestamp``, or None."""
    at = to_utc(timestamp)
    for gap in schedule.gaps:
        if gap.start_time <= at < gap.end_time:
            return gap
    return None


def is_timestamp_in_scheduled_gap(schedule: PrivacyGapSchedule, timestamp: Timestamp) -> bool:
    return get_current_gap(schedule, timestamp) is not None


def get_time_until_next_gap(schedule: PrivacyGapSchedule, timestamp: Timestamp) -> Optional[int]:
    """Milliseconds until the first gap starting strictly after ``timestamp``.

    Returns None when no later gap exists in the schedule.
    """
    at = to_utc(timestamp)
    for gap in schedule.gaps:
        if gap.start_time > at:
            return (gap.start_time - at) // timedelta(milliseconds=1)
    return None


def get_schedule_stats(schedule: PrivacyGapSchedule) -> ScheduleStats:
    total = sum(gap.duration_ms for gap in schedule.gaps)
    count = len(schedule.gaps)
    return ScheduleStats(
        gap_count=count,
        total_gap_ms=total,
        average_gap_ms=total / count if count else 0,
    )
