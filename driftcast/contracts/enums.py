"""Enumerations shared across all DriftCast contracts."""

from enum import Enum


class ForecastSource(str, Enum):
    """Upstream wind forecast model identifiers."""
    RAP = "RAP"
    OPEN_METEO = "Open-Meteo"


class DeploymentEvent(str, Enum):
    """What a descent step represents in the descent schedule."""
    APOGEE = "apogee"
    BAND = "band"  # Floor of a wind band, raw forecast values
    MAIN_DEPLOYMENT = "main_deployment"
    GROUND = "ground"


class SimulationState(str, Enum):
    """Stage reached by a single-hour descent simulation."""
    IDLE = "idle"
    APOGEE_LOCATED = "apogee_located"
    SCHEDULE_BUILT = "schedule_built"
    INTEGRATING = "integrating"
    COMPLETE = "complete"
    FAILED = "failed"


class FailureCode(str, Enum):
    """Machine-readable reasons an hour could not be simulated."""
    APOGEE_OUT_OF_RANGE = "apogee_out_of_range"
    INSUFFICIENT_DESCENT_DATA = "insufficient_descent_data"
    INVALID_DESCENT_RATE = "invalid_descent_rate"
