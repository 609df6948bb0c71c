"""Privacy gap configuration: bounds, defaults and validation."""
from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional

from privacy_gaps.errors import ConfigurationError

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

SCHEDULE_TTL_HOURS = 24


@dataclass(frozen=True)
class PrivacyGapConfig:
    """Bounds for one subject's daily privacy gaps.

    Hours are UTC hours of day. ``enabled`` is read by enforcement-facing
    helpers only; the generator ignores it.
    """
    waking_hours_start: int = 7
    waking_hours_end: int = 22
    min_daily_gaps: int = 2
    max_daily_gaps: int = 4
    min_gap_duration_ms: int = 5 * MINUTE_MS
    max_gap_duration_ms: int = 15 * MINUTE_MS
    min_gap_spacing_ms: int = 2 * HOUR_MS
    enabled: bool = True

    @property
    def window_minutes(self) -> int:
        return (self.waking_hours_end - self.waking_hours_start) * 60

    @property
    def footprint_minutes(self) -> int:
        """Maximum gap duration rounded up to whole minutes."""
        return math.ceil(self.max_gap_duration_ms / MINUTE_MS)

    @property
    def spacing_minutes(self) -> int:
        return math.ceil(self.min_gap_spacing_ms / MINUTE_MS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "wakingHoursStart": self.waking_hours_start,
            "wakingHoursEnd": self.waking_hours_end,
            "minDailyGaps": self.min_daily_gaps,
            "maxDailyGaps": self.max_daily_gaps,
            "minGapDurationMs": self.min_gap_duration_ms,
            "maxGapDurationMs": self.max_gap_duration_ms,
            "minGapSpacingMs": self.min_gap_spacing_ms,
        }


DEFAULT_PRIVACY_GAP_CONFIG = PrivacyGapConfig()

# camelCase keys as written by policy files and API clients
_FIELD_ALIASES: Dict[str, str] = {
    "wakingHoursStart": "waking_hours_start",
    "wakingHoursEnd": "waking_hours_end",
    "minDailyGaps": "min_daily_gaps",
    "maxDailyGaps": "max_daily_gaps",
    "minGapDurationMs": "min_gap_duration_ms",
    "maxGapDurationMs": "max_gap_duration_ms",
    "minGapSpacingMs": "min_gap_spacing_ms",
}
_INT_FIELDS = tuple(_FIELD_ALIASES.values())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def config_violations(config: PrivacyGapConfig) -> List[str]:
    """List every bound the config violates. Empty means valid."""
    problems: List[str] = []
    for name in _INT_FIELDS:
        if not _is_int(getattr(config, name)):
            problems.append(f"{name} must be an integer")
    if not isinstance(config.enabled, bool):
        problems.append("enabled must be a boolean")
    if problems:
        return problems

    start, end = config.waking_hours_start, config.waking_hours_end
    if not 0 <= start <= 23:
        problems.append(f"waking_hours_start must be within 0-23, got {start}")
    if not 0 <= end <= 23:
        problems.append(f"waking_hours_end must be within 0-23, got {end}")
    if start >= end:
        problems.append(f"waking hours window is empty ({start}:00-{end}:00)")

    if config.min_daily_gaps < 0:
        problems.append("min_daily_gaps must be non-negative")
    if config.min_daily_gaps > config.max_daily_gaps:
        problems.append(
            f"min_daily_gaps ({config.min_daily_gaps}) exceeds max_daily_gaps ({config.max_daily_gaps})"
        )

    if config.min_gap_duration_ms <= 0:
        problems.append("min_gap_duration_ms must be positive")
    if config.max_gap_duration_ms <= 0:
        problems.append("max_gap_duration_ms must be positive")
    if config.min_gap_duration_ms > config.max_gap_duration_ms:
        problems.append(
            f"min_gap_duration_ms ({config.min_gap_duration_ms}) exceeds "
            f"max_gap_duration_ms ({config.max_gap_duration_ms})"
        )
    if config.min_gap_spacing_ms < 0:
        problems.append("min_gap_spacing_ms must be non-negative")

    if not problems and config.max_daily_gaps * config.footprint_minutes > config.window_minutes:
        problems.append(
            f"waking hours window ({config.window_minutes} min) cannot hold "
            f"{config.max_daily_gaps} gaps of {config.footprint_minutes} min"
        )
    return problems


def validate_config(config: PrivacyGapConfig) -> PrivacyGapConfig:
    """Return ``config`` unchanged or raise ConfigurationError.

    No value is clamped or corrected.
    """
    if not isinstance(config, PrivacyGapConfig):
        raise ConfigurationError(f"Expected PrivacyGapConfig, got {type(config).__name__}")
    problems = config_violations(config)
    if problems:
        raise ConfigurationError("Invalid privacy gap config: " + "; ".join(problems), problems)
    return config


def config_from_mapping(
    data: Optional[Mapping[str, Any]],
    base: PrivacyGapConfig = DEFAULT_PRIVACY_GAP_CONFIG,
) -> PrivacyGapConfig:
    """Build a validated config from camelCase or snake_case keys layered over ``base``."""
    if data is None:
        return validate_config(base)
    if not isinstance(data, Mapping):
        raise ConfigurationError("Privacy gap config must be a mapping")

    known = {f.name for f in fields(PrivacyGapConfig)}
    overrides: Dict[str, Any] = {}
    unknown: List[str] = []
    for key, value in data.items():
        name = _FIELD_ALIASES.get(key, key)
        if name in known:
            overrides[name] = value
        else:
            unknown.append(str(key))
    if unknown:
        raise ConfigurationError(f"Unknown privacy gap config keys: {', '.join(sorted(unknown))}")
    return validate_config(replace(base, **overrides))


def safe_parse_config(data: Optional[Mapping[str, Any]]) -> Optional[PrivacyGapConfig]:
    """Like config_from_mapping but returns None for invalid input."""
    try:
        return config_from_mapping(data)
    except ConfigurationError:
        return None


def is_privacy_gaps_enabled(config: Optional[PrivacyGapConfig]) -> bool:
    # Gaps are on unless explicitly disabled
    if config is None:
        return True
    return bool(config.enabled)


def is_gap_duration_valid(duration_ms: int, config: PrivacyGapConfig) -> bool:
    return config.min_gap_duration_ms <= duration_ms <= config.max_gap_duration_ms


def is_gap_count_valid(count: int, config: PrivacyGapConfig) -> bool:
    return config.min_daily_gaps <= count <= config.max_daily_gaps


def is_within_waking_hours(hour: int, config: PrivacyGapConfig) -> bool:
    return config.waking_hours_start <= hour < config.waking_hours_end
