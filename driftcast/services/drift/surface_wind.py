"""Ground wind summary used to look up weathercock results."""

from __future__ import annotations

import logging
import math

from driftcast.contracts.enums import ForecastSource
from driftcast.contracts.wind import WindProfile, normalize_bearing
from driftcast.services.geodesy import knots_to_mph

logger = logging.getLogger(__name__)

# RAP profiles are sampled densely near the ground: average more of them
# for higher flights.
_RAP_LOW_APOGEE_FT = 1000
_RAP_LOW_SAMPLE_COUNT = 2
_RAP_HIGH_SAMPLE_COUNT = 4
_DEFAULT_SAMPLE_COUNT = 1


def surface_sample_count(profile: WindProfile, apogee_ft: float) -> int:
    """Number of lowest samples averaged into the surface wind."""
    if profile.model == ForecastSource.RAP.value:
        count = _RAP_LOW_SAMPLE_COUNT if apogee_ft <= _RAP_LOW_APOGEE_FT else _RAP_HIGH_SAMPLE_COUNT
    else:
        count = _DEFAULT_SAMPLE_COUNT

    if count > len(profile.samples):
        logger.debug(
            "Surface wind expected %d samples but only found %d",
            count, len(profile.samples),
        )
        count = len(profile.samples)
    return count


def surface_wind(profile: WindProfile, apogee_ft: float) -> tuple[int, float]:
    """Average ground wind as ``(speed_mph, direction_deg)``.

    Speed is rounded to whole mph, the unit weathercock tables are keyed by.
    Directions are averaged as unit vectors so 350 and 10 give 0.
    """
    samples = profile.samples[: surface_sample_count(profile, apogee_ft)]

    speed_kt = sum(s.speed_kt for s in samples) / len(samples)
    if len(samples) == 1:
        return round(knots_to_mph(speed_kt)), samples[0].direction_deg

    north = sum(math.cos(math.radians(s.direction_deg)) for s in samples)
    east = sum(math.sin(math.radians(s.direction_deg)) for s in samples)
    if abs(north) < 1e-12 and abs(east) < 1e-12:
        direction_deg = samples[0].direction_deg
    else:
        direction_deg = normalize_bearing(math.degrees(math.atan2(east, north)))

    return round(knots_to_mph(speed_kt)), direction_deg
