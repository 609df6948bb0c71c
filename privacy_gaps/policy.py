"""YAML-driven privacy gap policy files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from privacy_gaps.config import DEFAULT_PRIVACY_GAP_CONFIG, PrivacyGapConfig, config_from_mapping
from privacy_gaps.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PrivacyGapPolicy:
    """Gap bounds for every subject, loaded from a policy document.

    Policy format:
        defaults:
          minDailyGaps: 3
          maxDailyGaps: 5
          wakingHoursStart: 8

        subjects:
          child-1:
            enabled: false
          child-2:
            minGapSpacingMs: 3600000

    Lookup order for a subject: its own overrides, then ``defaults``, then
    the built-in defaults. Every resolved config is validated when the
    policy is loaded, so a bad file fails before any schedule is built.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, source: str = "<inline>"):
        data = data or {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"{source}: policy must be a mapping")
        self.source = source
        self.defaults = self._resolve(data.get("defaults"), DEFAULT_PRIVACY_GAP_CONFIG, "defaults")

        subjects = data.get("subjects") or {}
        if not isinstance(subjects, Mapping):
            raise ConfigurationError(f"{source}: 'subjects' must be a mapping")
        self._subjects: Dict[str, PrivacyGapConfig] = {
            str(subject_id): self._resolve(overrides, self.defaults, f"subjects.{subject_id}")
            for subject_id, overrides in subjects.items()
        }

    def _resolve(self, overrides: Any, base: PrivacyGapConfig, where: str) -> PrivacyGapConfig:
        try:
            return config_from_mapping(overrides, base=base)
        except ConfigurationError as exc:
            raise ConfigurationError(f"{self.source} [{where}]: {exc}", exc.violations) from exc

    @property
    def subject_ids(self) -> List[str]:
        return sorted(self._subjects)

    def config_for(self, subject_id: str) -> PrivacyGapConfig:
        return self._subjects.get(subject_id, self.defaults)


def load_policy(path: Path) -> PrivacyGapPolicy:
    """Load and validate a policy file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML,
            or describes invalid bounds
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as exc:
        raise ConfigurationError(f"Cannot load policy {path}: {exc}") from exc
    policy = PrivacyGapPolicy(data, source=str(path))
    logger.info("Loaded privacy gap policy %s (%d subject overrides)", path, len(policy.subject_ids))
    return policy


def load_policy_or_default(path: Optional[Path]) -> PrivacyGapPolicy:
    if path is None:
        return PrivacyGapPolicy()
    return load_policy(path)
