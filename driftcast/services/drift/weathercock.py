"""Weathercock adjustment of the rocket's apogee altitude and location.

During powered ascent a rocket turns into the wind, so it reaches a lower
apogee displaced upwind from the pad. The user supplies the expected
result at a few ground wind speeds (typically 0-20 mph in 5 mph steps).
"""

from __future__ import annotations

import logging

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.rocket import WeathercockEntry, WeathercockModel
from driftcast.services.drift.interpolation import linear_interpolate
from driftcast.services.geodesy import feet_to_meters, project

logger = logging.getLogger(__name__)

# Ground wind speeds (mph) the user table is expected to cover above 0 mph
TABLE_WIND_SPEEDS_MPH = (5, 10, 15, 20)


def build_weathercock_model(
    apogee_ft: float,
    table: dict[float, tuple[float | None, float | None]],
) -> WeathercockModel:
    """Build a model from user supplied ``{speed_mph: (distance_ft, apogee_ft)}`` rows.

    The 0 mph baseline (no displacement, unperturbed apogee) is always added.
    Rows missing a value are skipped.
    """
    entries = [WeathercockEntry(wind_speed_mph=0, upwind_distance_ft=0, apogee_ft=apogee_ft)]

    for speed in sorted(table):
        if speed <= 0:
            continue
        distance_ft, row_apogee_ft = table[speed]
        if distance_ft is None or row_apogee_ft is None:
            logger.debug("Skipping incomplete weathercock row for %s mph", speed)
            continue
        entries.append(WeathercockEntry(
            wind_speed_mph=speed,
            upwind_distance_ft=distance_ft,
            apogee_ft=row_apogee_ft,
        ))

    return WeathercockModel(entries=entries)


def _interpolate_entry(
    model: WeathercockModel, ground_wind_speed_mph: float
) -> tuple[float, float]:
    """Upwind distance (ft) and apogee (ft) at the given ground wind speed."""
    entries = model.entries
    lowest, highest = entries[0], entries[-1]

    if ground_wind_speed_mph <= lowest.wind_speed_mph:
        return lowest.upwind_distance_ft, lowest.apogee_ft

    # No extrapolation beyond the supplied data
    if ground_wind_speed_mph > highest.wind_speed_mph:
        return highest.upwind_distance_ft, highest.apogee_ft

    for index in range(1, len(entries)):
        upper = entries[index]
        if ground_wind_speed_mph <= upper.wind_speed_mph:
            lower = entries[index - 1]
            distance_ft = linear_interpolate(
                ground_wind_speed_mph,
                lower.wind_speed_mph, upper.wind_speed_mph,
                lower.upwind_distance_ft, upper.upwind_distance_ft,
            )
            apogee_ft = linear_interpolate(
                ground_wind_speed_mph,
                lower.wind_speed_mph, upper.wind_speed_mph,
                lower.apogee_ft, upper.apogee_ft,
            )
            return distance_ft, apogee_ft

    return highest.upwind_distance_ft, highest.apogee_ft


def apply_weathercock(
    model: WeathercockModel | None,
    ground_wind_speed_mph: float,
    wind_direction_deg: float,
    apogee_ft: float,
    start: GeoPoint,
) -> tuple[float, GeoPoint]:
    """Adjust apogee altitude and location for weathercocking.

    Returns ``(adjusted_apogee_ft, adjusted_location)``. The location moves
    toward ``wind_direction_deg``, the bearing the wind comes from. Without
    a usable table the inputs are returned unchanged.
    """
    if model is None or model.is_empty:
        return apogee_ft, start

    distance_ft, adjusted_apogee_ft = _interpolate_entry(model, ground_wind_speed_mph)
    logger.debug(
        "Weathercocking at %s mph: %.0f ft upwind toward %s deg, apogee %.0f ft",
        ground_wind_speed_mph, distance_ft, wind_direction_deg, adjusted_apogee_ft,
    )

    location = project(start, feet_to_meters(distance_ft), wind_direction_deg)
    return adjusted_apogee_ft, location
