"""Open-Meteo API client normalizing hourly winds aloft into WindProfiles."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.enums import ForecastSource
from driftcast.contracts.wind import WindProfile, WindSample
from driftcast.services.geodesy import meters_to_feet
from driftcast.services.weather.errors import ForecastFormatError

logger = logging.getLogger(__name__)

_SOURCE = ForecastSource.OPEN_METEO.value

OPEN_METEO_URL = os.getenv("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")
HTTP_TIMEOUT = float(os.getenv("DRIFTCAST_HTTP_TIMEOUT", "30"))

# Heights (m above ground) with direct wind values
HEIGHT_LEVELS_M = (10, 80, 120)

# Pressure levels (hPa), surface upward
PRESSURE_LEVELS_HPA = (
    1000, 975, 950, 925, 900, 850, 800, 750, 700, 650, 600, 550, 500,
    450, 400, 350, 300, 250, 200, 150, 100, 70, 50, 30, 20, 15, 10,
)


def _hourly_variables() -> list[str]:
    names = [f"wind_speed_{h}m" for h in HEIGHT_LEVELS_M]
    names += [f"wind_direction_{h}m" for h in HEIGHT_LEVELS_M]
    names += [f"wind_speed_{p}hPa" for p in PRESSURE_LEVELS_HPA]
    names += [f"wind_direction_{p}hPa" for p in PRESSURE_LEVELS_HPA]
    names += [f"geopotential_height_{p}hPa" for p in PRESSURE_LEVELS_HPA]
    return names


class OpenMeteoWindClient:
    """Async HTTP client for Open-Meteo winds at height and pressure levels."""

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._client = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)

    async def get_wind_profiles(
        self,
        location: GeoPoint,
        start: datetime,
        end: datetime,
    ) -> list[WindProfile | None]:
        """Fetch one profile per hour between ``start`` and ``end`` (UTC, inclusive).

        Hours the forecast cannot describe come back as None.
        """
        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "hourly": ",".join(_hourly_variables()),
            "start_hour": start.strftime("%Y-%m-%dT%H:00"),
            "end_hour": end.strftime("%Y-%m-%dT%H:00"),
            "wind_speed_unit": "kn",
        }
        resp = await self._client.get(OPEN_METEO_URL, params=params)
        resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError as exc:
            raise ForecastFormatError(_SOURCE, f"response is not JSON: {exc}") from exc
        return parse_openmeteo_hourly(data)

    async def get_wind_profile(
        self,
        location: GeoPoint,
        hour_offset: int,
        now: datetime | None = None,
    ) -> WindProfile | None:
        """Fetch the profile ``hour_offset`` hours from the current UTC hour."""
        now = now or datetime.now(tz=timezone.utc)
        target = now.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)
        target += timedelta(hours=hour_offset)

        profiles = await self.get_wind_profiles(location, target, target)
        return profiles[0] if profiles else None


def parse_openmeteo_hourly(data: dict[str, Any]) -> list[WindProfile | None]:
    """Normalize an Open-Meteo hourly response into one profile per hour.

    Height winds come first, preceded by a 0 ft copy of the lowest one
    (also used as the ground wind). Pressure-level winds follow when their
    geopotential height above ground exceeds every height wind.
    """
    hourly = data.get("hourly") if isinstance(data, dict) else None
    if not isinstance(hourly, dict):
        raise ForecastFormatError(_SOURCE, "response has no 'hourly' member")

    elevation_m = data.get("elevation") or 0.0
    times = hourly.get("time") or []

    profiles: list[WindProfile | None] = []
    for index in range(len(times)):
        try:
            profiles.append(_parse_hour(hourly, index, elevation_m))
        except (TypeError, ValueError) as exc:
            # ValueError covers pydantic's ValidationError for out-of-range values
            raise ForecastFormatError(_SOURCE, f"malformed winds for {times[index]}: {exc}") from exc
    return profiles


def _value_at(hourly: dict[str, Any], name: str, index: int) -> float | None:
    values = hourly.get(name)
    if not values or index >= len(values):
        return None
    return values[index]


def _parse_hour(hourly: dict[str, Any], index: int, elevation_m: float) -> WindProfile | None:
    height_winds: list[WindSample] = []
    for height_m in HEIGHT_LEVELS_M:
        speed = _value_at(hourly, f"wind_speed_{height_m}m", index)
        direction = _value_at(hourly, f"wind_direction_{height_m}m", index)
        if speed is None or direction is None:
            logger.debug("Wind at %d m for hour index %d is missing", height_m, index)
            continue
        height_winds.append(WindSample(
            altitude_ft=meters_to_feet(height_m),
            speed_kt=speed,
            direction_deg=direction % 360,
        ))

    pressure_winds: list[WindSample] = []
    for hpa in PRESSURE_LEVELS_HPA:
        speed = _value_at(hourly, f"wind_speed_{hpa}hPa", index)
        direction = _value_at(hourly, f"wind_direction_{hpa}hPa", index)
        height_m = _value_at(hourly, f"geopotential_height_{hpa}hPa", index)
        if speed is None or direction is None or height_m is None:
            logger.debug("Pressure %d hPa wind for hour index %d is missing", hpa, index)
            continue
        pressure_winds.append(WindSample(
            altitude_ft=max(meters_to_feet(height_m - elevation_m), 0.0),
            speed_kt=speed,
            direction_deg=direction % 360,
        ))

    samples: list[WindSample] = []
    for wind in height_winds + pressure_winds:
        if not samples:
            samples.append(WindSample(altitude_ft=0, speed_kt=wind.speed_kt, direction_deg=wind.direction_deg))
        if wind.altitude_ft > samples[-1].altitude_ft:
            samples.append(wind)

    if not samples:
        logger.debug("No usable winds for hour index %d", index)
        return None

    ground = samples[0]
    return WindProfile(
        model=_SOURCE,
        ground_elevation=elevation_m,
        ground_speed_kt=ground.speed_kt,
        ground_direction_deg=ground.direction_deg,
        samples=samples,
    )
