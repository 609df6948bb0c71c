"""Privacy gap error types."""
from __future__ import annotations

from typing import List, Optional


class ConfigurationError(ValueError):
    """Raised when a privacy gap configuration violates its bounds.

    Carries every violation found so callers can report them together.
    """

    def __init__(self, message: str, violations: Optional[List[str]] = None):
        super().__init__(message)
        self.violations: List[str] = list(violations or [message])
