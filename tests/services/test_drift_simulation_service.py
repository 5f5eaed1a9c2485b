"""Tests for the launch-window batch driver."""

from __future__ import annotations

import logging
from datetime import date, datetime

import httpx

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.launch import LaunchWindow
from driftcast.contracts.rocket import RecoveryProfile, RocketProfile
from driftcast.contracts.wind import WindProfile, WindSample
from driftcast.services.simulation_service import DriftSimulationService
from driftcast.services.weather.errors import ForecastFormatError
from driftcast.services.weather.openmeteo_client import OpenMeteoWindClient
from driftcast.services.weather.winds_aloft_client import WindsAloftClient

PAD = GeoPoint(latitude=35.0, longitude=-106.0)
ROCKET = RocketProfile(apogee_ft=1500, recovery=RecoveryProfile.dual(60, 500, 20))


def _profile(ceiling_ft: float = 3000) -> WindProfile:
    return WindProfile(
        model="RAP",
        samples=[
            WindSample(altitude_ft=0, speed_kt=8, direction_deg=270),
            WindSample(altitude_ft=1000, speed_kt=12, direction_deg=280),
            WindSample(altitude_ft=ceiling_ft, speed_kt=20, direction_deg=290),
        ],
    )


class FakeProvider:
    """Returns canned responses per hour offset and records call order."""

    def __init__(self, responses: dict[int, WindProfile | Exception | None]):
        self._responses = responses
        self.calls: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_wind_profile(self, location: GeoPoint, hour_offset: int) -> WindProfile | None:
        self.calls.append(hour_offset)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            response = self._responses.get(hour_offset)
            if isinstance(response, Exception):
                raise response
            return response
        finally:
            self.in_flight -= 1


class TestDriftSimulationService:
    async def test_all_hours_in_order(self):
        window = LaunchWindow(start_hour_offset=2, end_hour_offset=5, start_hour=10)
        provider = FakeProvider({offset: _profile() for offset in range(2, 6)})

        results = await DriftSimulationService(provider).run(PAD, ROCKET, window)

        assert provider.calls == [2, 3, 4, 5]
        assert provider.max_in_flight == 1
        assert [r.hour for r in results] == [10, 11, 12, 13]
        assert [r.hour_label for r in results] == ["10AM", "11AM", "12PM", "1PM"]

    async def test_failed_hours_are_skipped(self, caplog):
        window = LaunchWindow(start_hour_offset=0, end_hour_offset=4, start_hour=22)
        provider = FakeProvider({
            0: _profile(),
            1: None,
            2: ForecastFormatError("windsaloft.us", "no usable RAP winds in response"),
            3: _profile(ceiling_ft=1200),  # apogee above the forecast
            4: httpx.ConnectError("connection refused"),
        })

        with caplog.at_level(logging.WARNING):
            results = await DriftSimulationService(provider).run(PAD, ROCKET, window)

        assert provider.calls == [0, 1, 2, 3, 4]
        assert [r.hour for r in results] == [22]
        assert "offset 2" in caplog.text
        assert "offset 4" in caplog.text

    async def test_hours_wrap_past_midnight(self):
        window = LaunchWindow(start_hour_offset=0, end_hour_offset=2, start_hour=23)
        provider = FakeProvider({offset: _profile() for offset in range(3)})

        results = await DriftSimulationService(provider).run(PAD, ROCKET, window)

        assert [r.hour_label for r in results] == ["11PM", "12AM", "1AM"]

    async def test_launch_times_and_elevation(self):
        window = LaunchWindow.from_local_times(
            date(2025, 6, 15), 10, 11, now=datetime(2025, 6, 15, 9, 0)
        )
        provider = FakeProvider({1: _profile(), 2: _profile()})

        results = await DriftSimulationService(provider).run(PAD, ROCKET, window, elevation=1650)

        assert [r.launch_time for r in results] == [
            datetime(2025, 6, 15, 10, 0),
            datetime(2025, 6, 15, 11, 0),
        ]
        assert all(r.elevation == 1650 for r in results)

    async def test_empty_when_nothing_available(self):
        window = LaunchWindow(start_hour_offset=0, end_hour_offset=1, start_hour=8)
        results = await DriftSimulationService(FakeProvider({})).run(PAD, ROCKET, window)
        assert results == []


def _winds_aloft_payload(surface_speed: object = 8) -> dict:
    return {
        "model": "GFS",
        "groundElev": 1200,
        "groundSpd": 8,
        "groundDir": 270,
        "altFt": [0, 1000, 3000],
        "speed": {"0": surface_speed, "1000": 12, "3000": 20},
        "direction": {"0": 270, "1000": 280, "3000": 290},
    }


def _openmeteo_payload(surface_speed: object = 8.0) -> dict:
    return {
        "elevation": 0.0,
        "hourly": {
            "time": ["2025-06-15T09:00"],
            "wind_speed_10m": [surface_speed],
            "wind_direction_10m": [270],
            "wind_speed_80m": [10.0],
            "wind_direction_80m": [275],
            "wind_speed_120m": [11.0],
            "wind_direction_120m": [280],
            "wind_speed_925hPa": [20.0],
            "wind_direction_925hPa": [290],
            "geopotential_height_925hPa": [900.0],
        },
    }


class TestDriftSimulationServiceWithClients:
    async def test_malformed_winds_aloft_hours_are_skipped(self, caplog):
        bodies = {
            "0": httpx.Response(200, json=_winds_aloft_payload()),
            "1": httpx.Response(200, text="<html>upstream error</html>"),
            "2": httpx.Response(200, json=_winds_aloft_payload(surface_speed="n/a")),
            "3": httpx.Response(200, json=_winds_aloft_payload(surface_speed=-5)),
            "4": httpx.Response(200, json=_winds_aloft_payload()),
        }
        transport = httpx.MockTransport(lambda req: bodies[req.url.params["hourOffset"]])
        window = LaunchWindow(start_hour_offset=0, end_hour_offset=4, start_hour=9)

        async with httpx.AsyncClient(transport=transport) as http:
            service = DriftSimulationService(WindsAloftClient(http_client=http))
            with caplog.at_level(logging.WARNING):
                results = await service.run(PAD, ROCKET, window)

        assert [r.hour for r in results] == [9, 13]
        assert "offset 1" in caplog.text
        assert "offset 2" in caplog.text
        assert "offset 3" in caplog.text

    async def test_malformed_openmeteo_hours_are_skipped(self):
        bodies = [
            httpx.Response(200, json=_openmeteo_payload()),
            httpx.Response(200, text="<html>upstream error</html>"),
            httpx.Response(200, json=_openmeteo_payload(surface_speed="n/a")),
            httpx.Response(200, json=_openmeteo_payload()),
        ]
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.params["start_hour"])
            return bodies[len(requested) - 1]

        window = LaunchWindow(start_hour_offset=0, end_hour_offset=3, start_hour=9)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            service = DriftSimulationService(OpenMeteoWindClient(http_client=http))
            results = await service.run(PAD, ROCKET, window)

        assert len(requested) == 4
        assert [r.hour for r in results] == [9, 12]
        assert all(r.model == "Open-Meteo" for r in results)
