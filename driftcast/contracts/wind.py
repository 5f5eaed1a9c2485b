"""Wind forecast models — altitude-indexed wind samples and band queries.

A ``WindProfile`` is built once per (location, hour) forecast by a forecast
collaborator and is read-only afterwards. Altitudes are feet AGL.
"""

import logging
from typing import NamedTuple, Self

from pydantic import Field, model_validator

from driftcast.contracts.common import ContractModel

logger = logging.getLogger(__name__)


def normalize_bearing(bearing_deg: float) -> float:
    """Wrap a bearing into [0, 360)."""
    bearing_deg = bearing_deg % 360.0
    # A tiny negative input rounds up to exactly 360.0
    if bearing_deg >= 360.0:
        return 0.0
    return bearing_deg


def mean_bearing(first_deg: float, second_deg: float) -> float:
    """Average two bearings, staying on the short side of north.

    350 and 10 average to 0 rather than 180.
    """
    total = first_deg + second_deg
    if abs(first_deg - second_deg) < 180.0:
        return normalize_bearing(total / 2.0)

    average = (total - 360.0) / 2.0
    if average < 0.0:
        average += 360.0
    return normalize_bearing(average)


class WindSample(ContractModel):
    """Wind speed and direction at one altitude."""

    altitude_ft: float = Field(..., ge=0, description="ft AGL")
    speed_kt: float = Field(..., ge=0, description="kt")
    direction_deg: float = Field(
        ..., ge=0, lt=360, description="Bearing the wind blows from"
    )


class WindBand(NamedTuple):
    """Position of an altitude inside the band above ``floor_index``."""

    floor_index: int
    fraction: float


class WindProfile(ContractModel):
    """Winds at ascending altitudes from a single forecast model/hour."""

    model: str = Field(default="", description="e.g. 'RAP', 'Open-Meteo'")
    ground_elevation: float = Field(
        default=0.0, description="Opaque pass-through, units depend on source"
    )
    ground_speed_kt: float = Field(default=0.0, ge=0)
    ground_direction_deg: float = Field(default=0.0, ge=0, lt=360)
    samples: list[WindSample] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_ascending(self) -> Self:
        altitudes = [s.altitude_ft for s in self.samples]
        for lower, upper in zip(altitudes, altitudes[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Sample altitudes must be strictly ascending, got {lower} then {upper}"
                )
        return self

    @property
    def floor_altitude_ft(self) -> float:
        return self.samples[0].altitude_ft

    @property
    def ceiling_altitude_ft(self) -> float:
        return self.samples[-1].altitude_ft

    # ------------------------------------------------------------------
    # Band queries: out-of-range lookups return None
    # ------------------------------------------------------------------

    def band_fraction(self, altitude_ft: float, floor_index: int) -> float | None:
        """Fraction of the band above ``floor_index`` at which ``altitude_ft`` sits."""
        if floor_index < 0 or floor_index + 1 >= len(self.samples):
            logger.debug(
                "Band index %d exceeds the %d available samples",
                floor_index, len(self.samples),
            )
            return None

        floor = self.samples[floor_index].altitude_ft
        ceiling = self.samples[floor_index + 1].altitude_ft
        if altitude_ft < floor or altitude_ft > ceiling:
            logger.debug(
                "Altitude %s is outside the band between %s and %s",
                altitude_ft, floor, ceiling,
            )
            return None

        height = ceiling - floor
        if height <= 0:
            logger.debug("Band between %s and %s has no height", floor, ceiling)
            return None

        return (altitude_ft - floor) / height

    def band_containing(self, altitude_ft: float) -> WindBand | None:
        """Locate the lowest band whose altitude range includes ``altitude_ft``."""
        for index in range(len(self.samples) - 1):
            if self.samples[index].altitude_ft <= altitude_ft <= self.samples[index + 1].altitude_ft:
                fraction = self.band_fraction(altitude_ft, index)
                if fraction is None:
                    return None
                return WindBand(index, fraction)

        logger.debug(
            "Altitude %s is outside forecast coverage %s-%s",
            altitude_ft, self.floor_altitude_ft, self.ceiling_altitude_ft,
        )
        return None

    def _check_band(self, floor_index: int, fraction: float) -> None:
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Band fraction {fraction} is outside [0, 1]")
        if floor_index < 0 or floor_index + 1 >= len(self.samples):
            raise ValueError(
                f"Band index {floor_index} is outside the {len(self.samples)} samples"
            )

    def average_speed(self, floor_index: int, fraction: float) -> float:
        """Mean wind speed (kt) between the band floor and ``fraction`` of its height.

        Averages the floor speed with the interpolated speed at ``fraction``.
        """
        self._check_band(floor_index, fraction)
        floor_speed = self.samples[floor_index].speed_kt
        speed_range = self.samples[floor_index + 1].speed_kt - floor_speed
        speed_at_altitude = floor_speed + fraction * speed_range
        return (floor_speed + speed_at_altitude) / 2.0

    def average_direction(self, floor_index: int, fraction: float) -> float:
        """Mean wind direction between the band floor and ``fraction`` of its height."""
        self._check_band(floor_index, fraction)
        floor_direction = self.samples[floor_index].direction_deg
        target_direction = floor_direction + fraction * (
            self.samples[floor_index + 1].direction_deg - floor_direction
        )
        return mean_bearing(floor_direction, target_direction)
