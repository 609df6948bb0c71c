from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional

from privacy_gaps import (
    PrivacyGapConfig,
    PrivacyGapSchedule,
    ScheduledGap,
    generate_daily_gap_schedule,
    get_current_gap,
    get_schedule_stats,
    get_time_until_next_gap,
    is_privacy_gaps_enabled,
)
from privacy_gaps.policy import PrivacyGapPolicy, load_policy, load_policy_or_default
from privacy_gaps.utils import iso_z, parse_iso_ts, to_utc_date

EXPORTS_DIR = Path("exports")
EXPORT_COLUMNS = ["subject_id", "date", "gap_index", "start_time", "end_time", "duration_ms"]


@dataclass
class CheckResult:
    """Outcome of checking one instant against a subject's schedule."""
    subject_id: str
    at: datetime
    enabled: bool
    current_gap: Optional[ScheduledGap] = None
    ms_until_next_gap: Optional[int] = None

    @property
    def in_gap(self) -> bool:
        return self.current_gap is not None


def resolve_config(subject_id: str, policy_path: Optional[Path] = None) -> PrivacyGapConfig:
    return load_policy_or_default(policy_path).config_for(subject_id)


def generate(subject_id: str, day: str, policy_path: Optional[Path] = None) -> PrivacyGapSchedule:
    """Generate one subject's schedule for a UTC day.

    Raises:
        ConfigurationError: If the policy file is unreadable or invalid
        ValueError: If ``day`` is not a YYYY-MM-DD date
    """
    config = resolve_config(subject_id, policy_path)
    return generate_daily_gap_schedule(subject_id, to_utc_date(day), config)


def check(subject_id: str, timestamp: str, policy_path: Optional[Path] = None) -> CheckResult:
    """Check whether ``timestamp`` (ISO-8601) falls inside one of the subject's gaps."""
    at = parse_iso_ts(timestamp)
    config = resolve_config(subject_id, policy_path)
    if not is_privacy_gaps_enabled(config):
        return CheckResult(subject_id=subject_id, at=at, enabled=False)

    schedule = generate_daily_gap_schedule(subject_id, at.date(), config)
    return CheckResult(
        subject_id=subject_id,
        at=at,
        enabled=True,
        current_gap=get_current_gap(schedule, at),
        ms_until_next_gap=get_time_until_next_gap(schedule, at),
    )


def iter_days(start: date, end: date) -> List[date]:
    if end < start:
        raise ValueError(f"End date {end} is before start date {start}")
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def schedule_frame(subject_id: str, days: List[date], config: PrivacyGapConfig):
    """One row per gap across ``days``, in date then start-time order."""
    import pandas as pd

    rows = []
    for day in days:
        schedule = generate_daily_gap_schedule(subject_id, day, config)
        for index, gap in enumerate(schedule.gaps):
            rows.append({
                "subject_id": subject_id,
                "date": schedule.date_string,
                "gap_index": index,
                "start_time": iso_z(gap.start_time),
                "end_time": iso_z(gap.end_time),
                "duration_ms": gap.duration_ms,
            })
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_schedules(
    subject_id: str,
    start: str,
    end: str,
    fmt: str = "csv",
    output_path: Optional[Path] = None,
    policy_path: Optional[Path] = None,
) -> Path:
    """Re-derive a subject's schedules over a date range and write them out.

    Args:
        subject_id: Subject identifier
        start: First UTC day (YYYY-MM-DD)
        end: Last UTC day, inclusive
        fmt: csv or parquet
        output_path: Destination file; defaults to exports/<subject>_<start>_<end>.<fmt>
        policy_path: Optional policy file

    Returns:
        Path of the written file
    """
    if fmt not in ("csv", "parquet"):
        raise ValueError(f"Unsupported export format '{fmt}', expected csv or parquet")
    days = iter_days(to_utc_date(start), to_utc_date(end))
    df = schedule_frame(subject_id, days, resolve_config(subject_id, policy_path))

    if output_path is None:
        EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
        output_path = EXPORTS_DIR / f"{subject_id}_{days[0]}_{days[-1]}.{fmt}"

    if fmt == "parquet":
        df.to_parquet(output_path, index=False)
    else:
        df.to_csv(output_path, index=False)
    return output_path


def validate_policy(path: Path) -> PrivacyGapPolicy:
    return load_policy(path)


def print_schedule(schedule: PrivacyGapSchedule, as_json: bool = False) -> List[str]:
    """Format a schedule for CLI output.

    Args:
        schedule: The schedule to format
        as_json: If True, emit the serialized schedule instead of a table

    Returns:
        List of formatted output lines
    """
    if as_json:
        return [json.dumps(schedule.to_dict(), indent=2)]

    lines = [f"Privacy gaps for {schedule.subject_id} on {schedule.date_string} (UTC)"]
    if not schedule.gaps:
        lines.append("  No gaps scheduled")
        return lines
    for index, gap in enumerate(schedule.gaps, start=1):
        lines.append(
            f"  {index}. {gap.start_time:%H:%M:%S} - {gap.end_time:%H:%M:%S}"
            f"  ({gap.duration_ms / 60000:.1f} min)"
        )
    stats = get_schedule_stats(schedule)
    lines.append(f"  Total: {stats.total_gap_ms / 60000:.1f} min across {stats.gap_count} gaps")
    return lines


def print_check(result: CheckResult) -> List[str]:
    lines = [f"{result.subject_id} at {iso_z(result.at)}"]
    if not result.enabled:
        lines.append("  Privacy gaps disabled by policy")
        return lines
    if result.current_gap is not None:
        lines.append(f"  In gap until {iso_z(result.current_gap.end_time)}")
    else:
        lines.append("  Not in a gap")
    if result.ms_until_next_gap is not None:
        lines.append(f"  Next gap in {result.ms_until_next_gap / 60000:.1f} min")
    else:
        lines.append("  No further gaps today")
    return lines
