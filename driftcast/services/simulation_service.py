"""Launch-window drift simulation orchestrator."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.launch import LaunchSimulationResult, LaunchWindow
from driftcast.contracts.rocket import RocketProfile, WeathercockModel
from driftcast.contracts.wind import WindProfile
from driftcast.services.drift.descent import simulate_launch
from driftcast.services.weather.errors import ForecastError

logger = logging.getLogger(__name__)


class ForecastProvider(Protocol):
    """Anything able to return the wind profile for an hour offset from now."""

    async def get_wind_profile(self, location: GeoPoint, hour_offset: int) -> WindProfile | None:
        ...


class DriftSimulationService:
    """Simulates every hour of a launch window against one forecast provider."""

    def __init__(self, provider: ForecastProvider):
        self._provider = provider

    async def run(
        self,
        launch_site: GeoPoint,
        rocket: RocketProfile,
        window: LaunchWindow,
        weathercock: WeathercockModel | None = None,
        elevation: float | None = None,
    ) -> list[LaunchSimulationResult]:
        """Simulate each hour of ``window`` in order.

        Hours are fetched and simulated one at a time so results come back
        in window order. Hours without a forecast or whose simulation fails
        are left out.
        """
        results: list[LaunchSimulationResult] = []

        for hour_offset in window.hour_offsets():
            try:
                profile = await self._provider.get_wind_profile(launch_site, hour_offset)
            except (ForecastError, httpx.HTTPError) as exc:
                logger.warning("Forecast fetch failed for offset %d: %s", hour_offset, exc)
                continue

            if profile is None:
                logger.warning("No forecast for offset %d", hour_offset)
                continue

            outcome = simulate_launch(
                launch_site,
                rocket,
                profile,
                hour=window.hour_for_offset(hour_offset),
                launch_time=window.launch_time_for_offset(hour_offset),
                weathercock=weathercock,
                elevation=elevation,
            )
            if not outcome.success:
                logger.debug(
                    "Skipping offset %d: %s (%s)",
                    hour_offset, outcome.error.message, outcome.error.code,
                )
                continue

            results.append(outcome.data)

        logger.info(
            "Simulated %d of %d launch hours",
            len(results), len(window.hour_offsets()),
        )
        return results
