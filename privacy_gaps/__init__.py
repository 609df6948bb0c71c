"""Deterministic daily privacy gap schedules."""
from privacy_gaps.config import (
    DEFAULT_PRIVACY_GAP_CONFIG,
    SCHEDULE_TTL_HOURS,
    PrivacyGapConfig,
    config_from_mapping,
    is_gap_count_valid,
    is_gap_duration_valid,
    is_privacy_gaps_enabled,
    is_within_waking_hours,
    safe_parse_config,
    validate_config,
)
from privacy_gaps.errors import ConfigurationError
from privacy_gaps.policy import PrivacyGapPolicy, load_policy
from privacy_gaps.query import (
    ScheduleStats,
    get_current_gap,
    get_schedule_stats,
    get_time_until_next_gap,
    is_timestamp_in_scheduled_gap,
)
from privacy_gaps.rng import create_seeded_random
from privacy_gaps.scheduler import PrivacyGapSchedule, ScheduledGap, generate_daily_gap_schedule
from privacy_gaps.seed import build_seed

__all__ = [
    "DEFAULT_PRIVACY_GAP_CONFIG",
    "SCHEDULE_TTL_HOURS",
    "PrivacyGapConfig",
    "config_from_mapping",
    "is_gap_count_valid",
    "is_gap_duration_valid",
    "is_privacy_gaps_enabled",
    "is_within_waking_hours",
    "safe_parse_config",
    "validate_config",
    "ConfigurationError",
    "PrivacyGapPolicy",
    "load_policy",
    "ScheduleStats",
    "get_current_gap",
    "get_schedule_stats",
    "get_time_until_next_gap",
    "is_timestamp_in_scheduled_gap",
    "create_seeded_random",
    "PrivacyGapSchedule",
    "ScheduledGap",
    "generate_daily_gap_schedule",
    "build_seed",
]
