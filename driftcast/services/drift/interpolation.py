"""Scalar interpolation and reciprocal-bearing helpers."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def linear_interpolate(
    source_value: float,
    source_lower: float,
    source_upper: float,
    target_lower: float,
    target_upper: float,
) -> float:
    """Map ``source_value`` from the source range onto the target range.

    A zero-width source range yields ``target_lower``.
    """
    source_span = source_upper - source_lower
    if source_span == 0:
        logger.debug(
            "Invalid linear range %s to %s, defaulting to %s",
            source_lower, source_upper, target_lower,
        )
        return target_lower

    return target_lower + (source_value - source_lower) * (
        (target_upper - target_lower) / source_span
    )


def reciprocal_bearing(bearing_deg: float) -> float:
    """Opposite bearing in [0, 360): where a wind from ``bearing_deg`` blows to."""
    return (bearing_deg + 180.0) % 360.0
