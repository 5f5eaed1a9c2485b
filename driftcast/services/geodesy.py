"""Point projection and distance primitives on a spherical Earth.

All bearings are degrees clockwise from true north, distances are meters
unless the function name says otherwise.
"""

from __future__ import annotations

import math

from driftcast.contracts.common import GeoPoint

EARTH_RADIUS_M = 6_371_000.0
FEET_PER_METER = 3.28084
KNOTS_TO_MPH = 1.15078
KNOTS_TO_FPS = 1.68781


def feet_to_meters(feet: float) -> float:
    return feet / FEET_PER_METER


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def knots_to_mph(knots: float) -> float:
    return knots * KNOTS_TO_MPH


def knots_to_fps(knots: float) -> float:
    return knots * KNOTS_TO_FPS


def _wrap_longitude(longitude: float) -> float:
    """Wrap into [-180, 180)."""
    return (longitude + 540.0) % 360.0 - 180.0


def project(point: GeoPoint, distance_m: float, bearing_deg: float) -> GeoPoint:
    """Point reached travelling ``distance_m`` along the great circle at ``bearing_deg``."""
    lat1 = math.radians(point.latitude)
    lon1 = math.radians(point.longitude)
    theta = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M

    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    # asin is undefined just outside [-1, 1] from rounding at the poles
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * sin_lat2,
    )

    latitude = max(-90.0, min(90.0, math.degrees(lat2)))
    return GeoPoint(latitude=latitude, longitude=_wrap_longitude(math.degrees(lon2)))


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine great-circle distance in meters."""
    la1, lo1 = math.radians(a.latitude), math.radians(a.longitude)
    la2, lo2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = la2 - la1
    dlon = lo2 - lo1
    h = math.sin(dlat / 2) ** 2 + math.cos(la1) * math.cos(la2) * math.sin(dlon / 2) ** 2
    return 2 * math.asin(math.sqrt(min(1.0, h))) * EARTH_RADIUS_M


def initial_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Forward azimuth from ``a`` toward ``b`` in [0, 360)."""
    la1, la2 = math.radians(a.latitude), math.radians(b.latitude)
    dlon = math.radians(b.longitude - a.longitude)
    y = math.sin(dlon) * math.cos(la2)
    x = math.cos(la1) * math.sin(la2) - math.sin(la1) * math.cos(la2) * math.cos(dlon)
    return math.degrees(math.atan2(y, x)) % 360.0
