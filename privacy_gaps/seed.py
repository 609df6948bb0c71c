"""Seed strings for per-subject, per-day schedules."""
from __future__ import annotations

from datetime import date, datetime
from typing import Union

from privacy_gaps.utils import to_utc_date

DateLike = Union[date, datetime, str]


def format_date(value: DateLike) -> str:
    """Fixed-width ISO calendar day (YYYY-MM-DD) in UTC."""
    return to_utc_date(value).isoformat()


def build_seed(subject_id: str, value: DateLike) -> str:
    return f"{subject_id}:{format_date(value)}"
