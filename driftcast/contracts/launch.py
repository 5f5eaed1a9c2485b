"""Launch window, descent schedule and simulation result models.

``DescentStep`` lists are built fresh by the descent simulator for every hour.
``LaunchSimulationResult`` is the only object handed to rendering/export
collaborators and is never modified after construction.
"""

import math
from datetime import date, datetime, time, timedelta
from typing import Self

from pydantic import Field, computed_field, model_validator

from driftcast.contracts.common import ContractModel, GeoPoint
from driftcast.contracts.enums import DeploymentEvent

# Oldest forecast hour still served, and furthest forecast horizon
MIN_HOUR_OFFSET = -24
MAX_HOUR_OFFSET = 380


def format_hour(hour: int) -> str:
    """12-hour clock label: 0 -> '12AM', 12 -> '12PM', 15 -> '3PM'."""
    if hour == 0:
        return "12AM"
    if hour == 12:
        return "12PM"
    if hour > 12:
        return f"{hour - 12}PM"
    return f"{hour}AM"


class DescentStep(ContractModel):
    """Descent conditions from this altitude down to the next step."""

    altitude_ft: float = Field(..., description="ft AGL")
    descent_rate_fps: float = Field(..., description="Rate in effect below this altitude")
    wind_speed_kt: float = Field(..., ge=0)
    wind_direction_deg: float = Field(..., ge=0, lt=360)
    event: DeploymentEvent = DeploymentEvent.BAND


class FlightPathPoint(ContractModel):
    """A point along the rocket's flight path."""

    altitude_ft: float = Field(..., ge=0, description="ft AGL")
    location: GeoPoint


class LaunchSimulationResult(ContractModel):
    """Flight path and summary of one simulated launch hour.

    ``flight_path`` runs launch pad (0 ft) -> apogee -> ... -> landing (0 ft).
    """

    hour: int = Field(..., ge=0, le=23, description="Local clock hour of the launch")
    launch_time: datetime | None = None
    ground_wind_speed_mph: float = Field(..., ge=0)
    ground_wind_direction_deg: float = Field(..., ge=0, lt=360)
    model: str = Field(default="", description="Forecast model identifier")
    elevation: float = Field(default=0.0, ge=0, description="Launch site elevation")
    flight_path: list[FlightPathPoint] = Field(..., min_length=3)
    weathercock_distance_ft: int = Field(
        default=0, ge=0, description="Ground distance from the pad to the apogee location"
    )
    drift_distance_ft: int = Field(
        default=0, ge=0, description="Ground distance from the pad to the landing location"
    )

    @model_validator(mode="after")
    def validate_endpoints(self) -> Self:
        if self.flight_path[0].altitude_ft != 0:
            raise ValueError("Flight path must start on the ground")
        if self.flight_path[-1].altitude_ft != 0:
            raise ValueError("Flight path must end on the ground")
        return self

    @property
    def launch_point(self) -> FlightPathPoint:
        return self.flight_path[0]

    @property
    def apogee_point(self) -> FlightPathPoint:
        return self.flight_path[1]

    @property
    def landing_point(self) -> FlightPathPoint:
        return self.flight_path[-1]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hour_label(self) -> str:
        return format_hour(self.hour)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def apogee_ft(self) -> float:
        return self.apogee_point.altitude_ft


class LaunchWindow(ContractModel):
    """Hours during which launches are simulated, as offsets from now."""

    start_hour_offset: int = Field(..., ge=MIN_HOUR_OFFSET)
    end_hour_offset: int = Field(..., le=MAX_HOUR_OFFSET)
    start_hour: int = Field(..., ge=0, le=23, description="Local clock hour of the first offset")
    launch_date: date | None = None

    @model_validator(mode="after")
    def validate_order(self) -> Self:
        if self.end_hour_offset < self.start_hour_offset:
            raise ValueError(
                f"Launch ends (offset {self.end_hour_offset}) before it starts "
                f"(offset {self.start_hour_offset})"
            )
        return self

    @classmethod
    def from_local_times(
        cls,
        launch_date: date,
        start_hour: int,
        end_hour: int,
        now: datetime | None = None,
    ) -> "LaunchWindow":
        """Build a window from a launch date and local start/end hours."""
        if end_hour < start_hour:
            raise ValueError(f"Launch ends ({end_hour}h) before it starts ({start_hour}h)")

        now = now or datetime.now()
        start = datetime.combine(launch_date, time(hour=start_hour))
        end = datetime.combine(launch_date, time(hour=end_hour))
        return cls(
            start_hour_offset=math.ceil((start - now).total_seconds() / 3600),
            end_hour_offset=math.ceil((end - now).total_seconds() / 3600),
            start_hour=start_hour,
            launch_date=launch_date,
        )

    def hour_offsets(self) -> range:
        return range(self.start_hour_offset, self.end_hour_offset + 1)

    def hour_for_offset(self, hour_offset: int) -> int:
        """Local clock hour (0-23) of a given offset inside this window."""
        return (self.start_hour + hour_offset - self.start_hour_offset) % 24

    def launch_time_for_offset(self, hour_offset: int) -> datetime | None:
        if self.launch_date is None:
            return None
        start = datetime.combine(self.launch_date, time(hour=self.start_hour))
        return start + (hour_offset - self.start_hour_offset) * timedelta(hours=1)
