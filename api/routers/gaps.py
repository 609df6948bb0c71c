"""Privacy gap schedule API endpoints."""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from privacy_gaps import (
    ConfigurationError,
    PrivacyGapPolicy,
    config_from_mapping,
    generate_daily_gap_schedule,
    get_current_gap,
    get_time_until_next_gap,
    is_privacy_gaps_enabled,
)
from privacy_gaps.policy import load_policy_or_default
from privacy_gaps.utils import iso_z, now_utc, parse_iso_ts, to_utc_date

from api.schemas.gaps import Gap, GapConfig, GapSchedule, GapStatus, GenerateRequest

logger = logging.getLogger(__name__)

POLICY_ENV_VAR = "PRIVACY_GAPS_POLICY"

router = APIRouter(tags=["privacy-gaps"])


@lru_cache(maxsize=None)
def policy_from_path(raw: Optional[str]) -> PrivacyGapPolicy:
    """Load a policy once per process. Failed loads are not cached."""
    return load_policy_or_default(Path(raw) if raw else None)


def get_policy() -> PrivacyGapPolicy:
    """Policy named by PRIVACY_GAPS_POLICY, or the built-in defaults."""
    try:
        return policy_from_path(os.environ.get(POLICY_ENV_VAR) or None)
    except ConfigurationError as e:
        logger.error("Privacy gap policy unusable: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


def _parse_day(value: str):
    try:
        return to_utc_date(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date '{value}': {e}")


@router.get("/subjects/{subject_id}/schedules/{day}", response_model=GapSchedule)
def get_schedule(subject_id: str, day: str, policy: PrivacyGapPolicy = Depends(get_policy)):
    """Derive a subject's privacy gap schedule for one UTC day."""
    schedule = generate_daily_gap_schedule(subject_id, _parse_day(day), policy.config_for(subject_id))
    return GapSchedule.from_schedule(schedule)


@router.get("/subjects/{subject_id}/config", response_model=GapConfig)
def get_subject_config(subject_id: str, policy: PrivacyGapPolicy = Depends(get_policy)):
    """Resolved gap bounds for a subject."""
    return GapConfig.from_config(policy.config_for(subject_id))


@router.get("/subjects/{subject_id}/status", response_model=GapStatus)
def get_status(
    subject_id: str,
    at: Optional[str] = Query(default=None, description="ISO-8601 instant, defaults to now"),
    policy: PrivacyGapPolicy = Depends(get_policy),
):
    """Report whether the subject is in a privacy gap at ``at``."""
    try:
        instant = parse_iso_ts(at) if at else now_utc()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid timestamp '{at}': {e}")

    config = policy.config_for(subject_id)
    day = instant.date()
    if not is_privacy_gaps_enabled(config):
        return GapStatus(
            subject_id=subject_id,
            at=iso_z(instant),
            date=day.isoformat(),
            enabled=False,
            in_gap=False,
        )

    schedule = generate_daily_gap_schedule(subject_id, day, config)
    current = get_current_gap(schedule, instant)
    return GapStatus(
        subject_id=subject_id,
        at=iso_z(instant),
        date=day.isoformat(),
        enabled=True,
        in_gap=current is not None,
        current_gap=Gap.from_gap(current) if current else None,
        ms_until_next_gap=get_time_until_next_gap(schedule, instant),
    )


@router.post("/schedules/generate", response_model=GapSchedule)
def generate_schedule(request: GenerateRequest):
    """Generate a schedule with an inline config instead of the policy file."""
    day = _parse_day(request.date)
    try:
        config = config_from_mapping(request.config.overrides() if request.config else None)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    schedule = generate_daily_gap_schedule(request.subject_id, day, config)
    return GapSchedule.from_schedule(schedule)
