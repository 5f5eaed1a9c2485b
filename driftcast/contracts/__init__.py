"""DriftCast data contracts — Pydantic v2 models for rocket recovery drift.

Inputs (supplied by the caller, read-only)
------------------------------------------
- ``GeoPoint`` — launch site
- ``RocketProfile`` / ``RecoveryProfile`` — expected apogee and parachutes
- ``WeathercockModel`` — optional ground-wind-indexed ascent table
- ``LaunchWindow`` — hours to simulate, as offsets from now

Forecast (built by a forecast collaborator, one per location and hour)
----------------------------------------------------------------------
- ``WindProfile`` / ``WindSample`` — winds at ascending altitudes

Calculated (never persisted)
----------------------------
- ``DescentStep`` — descent schedule rows, rebuilt for every hour
- ``LaunchSimulationResult`` — flight path and summary of one launch hour
- ``SimulationOutcome`` — success/failure wrapper of a single-hour simulation
"""

from driftcast.contracts.enums import (
    DeploymentEvent,
    FailureCode,
    ForecastSource,
    SimulationState,
)
from driftcast.contracts.common import ContractModel, GeoPoint
from driftcast.contracts.result import SimulationError, SimulationOutcome
from driftcast.contracts.wind import WindBand, WindProfile, WindSample
from driftcast.contracts.rocket import (
    RecoveryProfile,
    RocketProfile,
    WeathercockEntry,
    WeathercockModel,
)
from driftcast.contracts.launch import (
    MAX_HOUR_OFFSET,
    MIN_HOUR_OFFSET,
    DescentStep,
    FlightPathPoint,
    LaunchSimulationResult,
    LaunchWindow,
    format_hour,
)

__all__ = [
    # Enums
    "DeploymentEvent",
    "FailureCode",
    "ForecastSource",
    "SimulationState",
    # Common
    "ContractModel",
    "GeoPoint",
    # Result
    "SimulationError",
    "SimulationOutcome",
    # Domain models
    "WindBand",
    "WindProfile",
    "WindSample",
    "RecoveryProfile",
    "RocketProfile",
    "WeathercockEntry",
    "WeathercockModel",
    "MAX_HOUR_OFFSET",
    "MIN_HOUR_OFFSET",
    "DescentStep",
    "FlightPathPoint",
    "LaunchSimulationResult",
    "LaunchWindow",
    "format_hour",
]
