"""windsaloft.us client for RAP / GFS winds aloft profiles."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.enums import ForecastSource
from driftcast.contracts.wind import WindProfile, WindSample
from driftcast.services.weather.errors import ForecastFormatError

logger = logging.getLogger(__name__)

WINDS_ALOFT_URL = os.getenv("WINDS_ALOFT_URL", "https://windsaloft.us/winds.php")
WINDS_ALOFT_REFERRER = os.getenv("WINDS_ALOFT_REFERRER", "driftcast")
HTTP_TIMEOUT = float(os.getenv("DRIFTCAST_HTTP_TIMEOUT", "30"))

_SOURCE = "windsaloft.us"


class WindsAloftClient:
    """Async HTTP client for the windsaloft.us JSON endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        referrer: str = WINDS_ALOFT_REFERRER,
    ):
        self._client = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)
        self._referrer = referrer

    async def get_wind_profile(self, location: GeoPoint, hour_offset: int) -> WindProfile | None:
        """Fetch the profile ``hour_offset`` hours from now at ``location``."""
        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "hourOffset": hour_offset,
            "referrer": self._referrer,
        }
        resp = await self._client.get(WINDS_ALOFT_URL, params=params)
        resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError as exc:
            raise ForecastFormatError(_SOURCE, f"response is not JSON: {exc}") from exc

        if not data:
            logger.warning("Empty winds aloft response for offset %d", hour_offset)
            return None
        return parse_winds_aloft(data)


def _altitude_key(altitude: float) -> str:
    # Per-altitude maps are keyed by the altitude as the service prints it
    if float(altitude).is_integer():
        return str(int(altitude))
    return str(altitude)


def parse_winds_aloft(data: dict[str, Any]) -> WindProfile:
    """Normalize a windsaloft.us payload.

    RAP payloads carry raw per-level values (``altFtRaw``, ``speedRaw``,
    ``directionRaw``); other models carry the coarser ``altFt`` set.
    """
    if not isinstance(data, dict):
        raise ForecastFormatError(_SOURCE, f"expected a JSON object, got {type(data).__name__}")

    model = data.get("model")
    if not model:
        raise ForecastFormatError(_SOURCE, "response has no 'model' member")

    if model == ForecastSource.RAP.value:
        altitudes = data.get("altFtRaw") or []
        speeds = data.get("speedRaw") or {}
        directions = data.get("directionRaw") or {}
    else:
        altitudes = data.get("altFt") or []
        speeds = data.get("speed") or {}
        directions = data.get("direction") or {}

    if not isinstance(speeds, dict) or not isinstance(directions, dict):
        raise ForecastFormatError(_SOURCE, f"{model} winds are not keyed by altitude")

    try:
        return _build_profile(model, data, altitudes, speeds, directions)
    except (TypeError, ValueError) as exc:
        # ValueError covers pydantic's ValidationError for out-of-range values
        raise ForecastFormatError(_SOURCE, f"malformed {model} winds: {exc}") from exc


def _build_profile(
    model: str,
    data: dict[str, Any],
    altitudes: list[Any],
    speeds: dict[str, Any],
    directions: dict[str, Any],
) -> WindProfile:
    samples: list[WindSample] = []
    for altitude in sorted({float(a) for a in altitudes}):
        if altitude < 0:
            logger.debug("Skipping below-ground altitude %s ft", altitude)
            continue
        key = _altitude_key(altitude)
        speed = speeds.get(key)
        direction = directions.get(key)
        if speed is None or direction is None:
            logger.debug("No %s wind at %s ft", model, key)
            continue
        samples.append(WindSample(
            altitude_ft=altitude,
            speed_kt=int(float(speed)),
            direction_deg=int(float(direction)) % 360,
        ))

    if not samples:
        raise ForecastFormatError(_SOURCE, f"no usable {model} winds in response")

    return WindProfile(
        model=model,
        ground_elevation=float(data.get("groundElev") or 0.0),
        ground_speed_kt=float(data.get("groundSpd") or 0.0),
        ground_direction_deg=float(data.get("groundDir") or 0.0) % 360,
        samples=samples,
    )
