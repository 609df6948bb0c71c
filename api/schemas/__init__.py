"""Pydantic schemas for API request/response models."""
from api.schemas.gaps import Gap, GapConfig, GapSchedule, GapStatus, GenerateRequest

__all__ = [
    "Gap",
    "GapConfig",
    "GapSchedule",
    "GapStatus",
    "GenerateRequest",
]
