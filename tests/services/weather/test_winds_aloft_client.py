"""Tests for the windsaloft.us client with mocked HTTP responses."""

from __future__ import annotations

import httpx
import pytest

from driftcast.contracts.common import GeoPoint
from driftcast.services.weather.errors import ForecastFormatError
from driftcast.services.weather.winds_aloft_client import WindsAloftClient, parse_winds_aloft

RAP_RESPONSE = {
    "model": "RAP",
    "groundElev": 5312,
    "groundSpd": 6,
    "groundDir": 360,
    "altFtRaw": [0, 1000, 500, 1000, 2000],
    "speedRaw": {"0": "6", "500": "7.9", "1000": "12", "2000": 18},
    "directionRaw": {"0": "360", "500": "275", "1000": "280"},
    # Coarse values a RAP profile must ignore
    "altFt": [0, 3000],
    "speed": {"0": 1, "3000": 40},
    "direction": {"0": 10, "3000": 90},
}

GFS_RESPONSE = {
    "model": "GFS",
    "groundElev": 120,
    "groundSpd": 4,
    "groundDir": 200,
    "altFt": [0, 3000, 6000],
    "speed": {"0": 4, "3000": 15, "6000": 25},
    "direction": {"0": 200, "3000": 220, "6000": 240},
}

PAD = GeoPoint(latitude=32.99, longitude=-106.97)


class TestParseWindsAloft:
    def test_rap_uses_raw_levels(self):
        profile = parse_winds_aloft(RAP_RESPONSE)
        assert profile.model == "RAP"
        # 2000 ft has no direction and is dropped
        assert [s.altitude_ft for s in profile.samples] == [0, 500, 1000]
        assert [s.speed_kt for s in profile.samples] == [6, 7, 12]
        assert [s.direction_deg for s in profile.samples] == [0, 275, 280]

    def test_ground_values(self):
        profile = parse_winds_aloft(RAP_RESPONSE)
        assert profile.ground_elevation == 5312
        assert profile.ground_speed_kt == 6
        assert profile.ground_direction_deg == 0

    def test_other_models_use_coarse_levels(self):
        profile = parse_winds_aloft(GFS_RESPONSE)
        assert profile.model == "GFS"
        assert [s.altitude_ft for s in profile.samples] == [0, 3000, 6000]
        assert profile.samples[-1].direction_deg == 240

    def test_missing_model(self):
        with pytest.raises(ForecastFormatError, match="model"):
            parse_winds_aloft({"altFt": [0]})

    def test_no_usable_winds(self):
        with pytest.raises(ForecastFormatError, match="no usable"):
            parse_winds_aloft({"model": "GFS", "altFt": [0], "speed": {}, "direction": {}})

    def test_non_numeric_value(self):
        data = {**GFS_RESPONSE, "speed": {"0": "n/a", "3000": 15, "6000": 25}}
        with pytest.raises(ForecastFormatError, match="malformed GFS winds"):
            parse_winds_aloft(data)

    def test_out_of_range_value(self):
        data = {**GFS_RESPONSE, "speed": {"0": -4, "3000": 15, "6000": 25}}
        with pytest.raises(ForecastFormatError, match="malformed GFS winds"):
            parse_winds_aloft(data)

    def test_not_an_object(self):
        with pytest.raises(ForecastFormatError, match="JSON object"):
            parse_winds_aloft([1, 2, 3])


class TestWindsAloftClient:
    async def test_get_wind_profile(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=RAP_RESPONSE)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = WindsAloftClient(http_client=http, referrer="test-suite")
            profile = await client.get_wind_profile(PAD, 7)

        assert profile.model == "RAP"
        params = seen[0].url.params
        assert params["hourOffset"] == "7"
        assert params["referrer"] == "test-suite"
        assert params["lat"] == "32.99"

    async def test_empty_response(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json={}))
        async with httpx.AsyncClient(transport=transport) as http:
            client = WindsAloftClient(http_client=http)
            assert await client.get_wind_profile(PAD, 0) is None

    async def test_http_error_propagates(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as http:
            client = WindsAloftClient(http_client=http)
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_wind_profile(PAD, 0)

    async def test_non_json_body(self):
        transport = httpx.MockTransport(
            lambda req: httpx.Response(200, text="<html>upstream error</html>")
        )
        async with httpx.AsyncClient(transport=transport) as http:
            client = WindsAloftClient(http_client=http)
            with pytest.raises(ForecastFormatError, match="not JSON"):
                await client.get_wind_profile(PAD, 0)
