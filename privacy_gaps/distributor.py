"""Gap count, placement and duration draws.

All placement happens in whole minutes from the start of the waking-hours
window. Each function consumes draws from the supplied generator in a fixed
order; changing that order changes every schedule.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)

Draw = Callable[[], float]


def _uniform_int(draw: float, low: int, high: int) -> int:
    """Map a draw in [0, 1) onto the integers low..high inclusive."""
    return low + math.floor(draw * (high - low + 1))


def select_gap_count(rand: Draw, min_gaps: int, max_gaps: int) -> int:
    return _uniform_int(rand(), min_gaps, max_gaps)


def segment_bounds(index: int, count: int, window_minutes: int) -> Tuple[int, int]:
    """Start (inclusive) and end (exclusive) minute of stratum ``index``."""
    return (index * window_minutes) // count, ((index + 1) * window_minutes) // count


def has_spacing_capacity(
    count: int,
    window_minutes: int,
    spacing_minutes: int,
    footprint_minutes: int,
) -> bool:
    """Whether ``count`` gaps and the spacing between them fit the window at all."""
    if count <= 1:
        return True
    required = (count - 1) * (spacing_minutes + footprint_minutes)
    return required <= window_minutes - count * footprint_minutes


def can_place_randomly(
    count: int,
    window_minutes: int,
    spacing_minutes: int,
    footprint_minutes: int,
) -> bool:
    """Whether stratified random placement can honour the minimum spacing.

    On top of the capacity check every segment must be wide enough for a
    gap plus its spacing, so each draw has a non-empty range.
    """
    if count <= 1:
        return True
    if not has_spacing_capacity(count, window_minutes, spacing_minutes, footprint_minutes):
        return False
    return spacing_minutes + footprint_minutes <= window_minutes // count


def packed_offsets(count: int, window_minutes: int, spacing_minutes: int, footprint_minutes: int) -> List[int]:
    """Starts ``footprint + spacing`` apart, with the slack shared out evenly.

    Used when the spacing fits the window but not the equal segments.
    Consumes no draws.
    """
    step = footprint_minutes + spacing_minutes
    slack = window_minutes - footprint_minutes - (count - 1) * step
    return [i * step + ((i + 1) * slack) // (count + 1) for i in range(count)]


def even_spacing_offsets(count: int, window_minutes: int, footprint_minutes: int) -> List[int]:
    """Centre ``count`` gaps in equal slots across the window. Consumes no draws."""
    return [
        (2 * i * window_minutes + window_minutes - count * footprint_minutes) // (2 * count)
        for i in range(count)
    ]


def distribute_gap_offsets(
    rand: Draw,
    count: int,
    window_minutes: int,
    spacing_minutes: int,
    footprint_minutes: int,
) -> List[int]:
    """Place ``count`` gap starts inside the window.

    Args:
        rand: Seeded draw function
        count: Number of gaps to place
        window_minutes: Length of the waking-hours window
        spacing_minutes: Minimum quiet time between one gap's end and the next start
        footprint_minutes: Assumed length of every gap for feasibility

    Returns:
        Ascending minute offsets from the window start
    """
    if count <= 0:
        return []

    if count == 1:
        return [_uniform_int(rand(), 0, window_minutes - footprint_minutes)]

    if not has_spacing_capacity(count, window_minutes, spacing_minutes, footprint_minutes):
        logger.debug(
            "Spacing of %d min does not fit %d gaps in %d min, using even spacing",
            spacing_minutes,
            count,
            window_minutes,
        )
        return even_spacing_offsets(count, window_minutes, footprint_minutes)

    if not can_place_randomly(count, window_minutes, spacing_minutes, footprint_minutes):
        logger.debug("Segments too narrow for %d gaps, packing at minimum spacing", count)
        return packed_offsets(count, window_minutes, spacing_minutes, footprint_minutes)

    offsets: List[int] = []
    for index in range(count):
        seg_start, seg_end = segment_bounds(index, count, window_minutes)
        low = seg_start
        if offsets:
            low = max(low, offsets[-1] + footprint_minutes + spacing_minutes)
        high = seg_end - footprint_minutes
        offsets.append(_uniform_int(rand(), low, high))
    return offsets


def sample_durations(rand: Draw, count: int, min_duration_ms: int, max_duration_ms: int) -> List[int]:
    return [_uniform_int(rand(), min_duration_ms, max_duration_ms) for _ in range(count)]
