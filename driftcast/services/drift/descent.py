"""Descent simulator: drift of a rocket under parachute from apogee to ground.

The simulation runs as a small state machine for one launch hour:

    IDLE -> APOGEE_LOCATED -> SCHEDULE_BUILT -> INTEGRATING -> COMPLETE

Any stage may end in FAILED (apogee outside the forecast, too little
descent data, unusable descent rate). Failures are returned as a
``SimulationOutcome`` so a batch can skip the hour and carry on.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from driftcast.contracts.common import GeoPoint
from driftcast.contracts.enums import DeploymentEvent, FailureCode, SimulationState
from driftcast.contracts.launch import DescentStep, FlightPathPoint, LaunchSimulationResult
from driftcast.contracts.result import SimulationOutcome
from driftcast.contracts.rocket import RecoveryProfile, RocketProfile, WeathercockModel
from driftcast.contracts.wind import WindBand, WindProfile, mean_bearing
from driftcast.services.drift.interpolation import reciprocal_bearing
from driftcast.services.drift.surface_wind import surface_wind
from driftcast.services.drift.weathercock import apply_weathercock
from driftcast.services.geodesy import distance, feet_to_meters, knots_to_fps, meters_to_feet, project

logger = logging.getLogger(__name__)

MIN_DESCENT_STEPS = 2

DescentOutcome = SimulationOutcome[LaunchSimulationResult]


def _ground_distance_ft(a: GeoPoint, b: GeoPoint) -> int:
    return round(meters_to_feet(distance(a, b)))


def _main_is_open_at(recovery: RecoveryProfile, altitude_ft: float) -> bool:
    return (
        recovery.dual_deployment
        and recovery.main_deploy_altitude_ft is not None
        and altitude_ft <= recovery.main_deploy_altitude_ft
    )


def locate_apogee(
    profile: WindProfile,
    apogee_ft: float,
    recovery: RecoveryProfile,
) -> tuple[WindBand, DescentStep] | None:
    """Find the wind band holding apogee and the first descent step.

    The step carries the average wind between the band floor and apogee.
    Returns None when apogee lies outside the forecast.
    """
    band = profile.band_containing(apogee_ft)
    if band is None:
        return None

    # A weathercocked apogee can end up below the main event
    if _main_is_open_at(recovery, apogee_ft):
        rate = recovery.main_descent_rate_fps
    else:
        rate = recovery.apogee_descent_rate_fps

    step = DescentStep(
        altitude_ft=apogee_ft,
        descent_rate_fps=rate,
        wind_speed_kt=profile.average_speed(band.floor_index, band.fraction),
        wind_direction_deg=profile.average_direction(band.floor_index, band.fraction),
        event=DeploymentEvent.APOGEE,
    )
    return band, step


def build_descent_schedule(
    profile: WindProfile,
    apogee_ft: float,
    recovery: RecoveryProfile,
) -> list[DescentStep] | None:
    """Descent steps from apogee down to the ground, strictly descending.

    Returns None when apogee lies outside the forecast.
    """
    located = locate_apogee(profile, apogee_ft, recovery)
    if located is None:
        return None
    band, apogee_step = located

    samples = profile.samples
    deploy_ft = recovery.main_deploy_altitude_ft if recovery.dual_deployment else None
    main_rate = recovery.main_descent_rate_fps
    rate = apogee_step.descent_rate_fps
    steps = [apogee_step]

    for index in range(band.floor_index, -1, -1):
        lower, upper = samples[index], samples[index + 1]
        if upper.altitude_ft - lower.altitude_ft <= 0:
            logger.debug(
                "Skipping wind band: altitude %s is not below %s",
                lower.altitude_ft, upper.altitude_ft,
            )
            continue

        if deploy_ft is not None and deploy_ft < steps[-1].altitude_ft:
            if lower.altitude_ft == deploy_ft:
                # The band floor doubles as the main event
                steps.append(DescentStep(
                    altitude_ft=deploy_ft,
                    descent_rate_fps=main_rate,
                    wind_speed_kt=lower.speed_kt,
                    wind_direction_deg=lower.direction_deg,
                    event=DeploymentEvent.MAIN_DEPLOYMENT,
                ))
                rate = main_rate
                continue

            if lower.altitude_ft < deploy_ft < upper.altitude_ft:
                fraction = profile.band_fraction(deploy_ft, index)
                if fraction is not None:
                    steps.append(DescentStep(
                        altitude_ft=deploy_ft,
                        descent_rate_fps=main_rate,
                        wind_speed_kt=profile.average_speed(index, fraction),
                        wind_direction_deg=profile.average_direction(index, fraction),
                        event=DeploymentEvent.MAIN_DEPLOYMENT,
                    ))
                    rate = main_rate

        if lower.altitude_ft >= steps[-1].altitude_ft:
            # Apogee sits exactly on this band floor
            continue

        steps.append(DescentStep(
            altitude_ft=lower.altitude_ft,
            descent_rate_fps=rate,
            wind_speed_kt=lower.speed_kt,
            wind_direction_deg=lower.direction_deg,
            event=DeploymentEvent.BAND,
        ))

    # Carry the lowest forecast wind down to the ground
    if steps[-1].altitude_ft > 0:
        lowest = samples[0]
        steps.append(DescentStep(
            altitude_ft=0.0,
            descent_rate_fps=rate,
            wind_speed_kt=lowest.speed_kt,
            wind_direction_deg=lowest.direction_deg,
            event=DeploymentEvent.GROUND,
        ))
    elif steps[-1].event == DeploymentEvent.BAND:
        steps[-1] = steps[-1].model_copy(update={"event": DeploymentEvent.GROUND})

    return steps


def integrate_drift(
    steps: list[DescentStep],
    start: GeoPoint,
) -> list[FlightPathPoint] | None:
    """Drift the rocket down the schedule, one point per step below apogee.

    Each leg uses the descent rate recorded on its upper step and the
    average of the winds at both ends; drift is applied downwind.
    Returns None if a leg has an unusable descent rate.
    """
    location = start
    path: list[FlightPathPoint] = []

    for previous, current in zip(steps, steps[1:]):
        rate = previous.descent_rate_fps
        if not math.isfinite(rate) or rate <= 0:
            logger.debug("Cannot descend with a rate of %s ft/s", rate)
            return None

        descent_ft = previous.altitude_ft - current.altitude_ft
        wind_speed_kt = (previous.wind_speed_kt + current.wind_speed_kt) / 2.0
        wind_direction_deg = mean_bearing(previous.wind_direction_deg, current.wind_direction_deg)

        duration_s = descent_ft / rate
        drift_ft = duration_s * knots_to_fps(wind_speed_kt)

        location = project(location, feet_to_meters(drift_ft), reciprocal_bearing(wind_direction_deg))
        path.append(FlightPathPoint(altitude_ft=current.altitude_ft, location=location))

    return path


def simulate_launch(
    launch_site: GeoPoint,
    rocket: RocketProfile,
    profile: WindProfile,
    *,
    hour: int,
    launch_time: datetime | None = None,
    weathercock: WeathercockModel | None = None,
    elevation: float | None = None,
) -> DescentOutcome:
    """Simulate one launch hour from pad to landing."""
    ground_speed_mph, ground_direction_deg = surface_wind(profile, rocket.apogee_ft)

    apogee_ft, apogee_location = apply_weathercock(
        weathercock, ground_speed_mph, ground_direction_deg, rocket.apogee_ft, launch_site
    )
    if apogee_ft <= 0:
        apogee_ft = rocket.apogee_ft

    steps = build_descent_schedule(profile, apogee_ft, rocket.recovery)
    if steps is None:
        logger.debug(
            "Apogee %s ft is outside the %s forecast (%s-%s ft)",
            apogee_ft, profile.model, profile.floor_altitude_ft, profile.ceiling_altitude_ft,
        )
        return DescentOutcome.fail(
            FailureCode.APOGEE_OUT_OF_RANGE,
            f"Apogee {apogee_ft} ft is outside forecast coverage",
            SimulationState.APOGEE_LOCATED,
            apogee_ft=apogee_ft,
            ceiling_ft=profile.ceiling_altitude_ft,
        )

    if len(steps) < MIN_DESCENT_STEPS:
        logger.debug("List of descent data is too short: %d", len(steps))
        return DescentOutcome.fail(
            FailureCode.INSUFFICIENT_DESCENT_DATA,
            f"Only {len(steps)} descent step(s) generated",
            SimulationState.SCHEDULE_BUILT,
            steps=len(steps),
        )

    descent_path = integrate_drift(steps, apogee_location)
    if descent_path is None:
        return DescentOutcome.fail(
            FailureCode.INVALID_DESCENT_RATE,
            "Descent schedule contains a zero or invalid descent rate",
            SimulationState.INTEGRATING,
        )

    if elevation is None or elevation < 0:
        elevation = max(profile.ground_elevation, 0.0)

    flight_path = [
        FlightPathPoint(altitude_ft=0.0, location=launch_site),
        FlightPathPoint(altitude_ft=apogee_ft, location=apogee_location),
        *descent_path,
    ]
    result = LaunchSimulationResult(
        hour=hour,
        launch_time=launch_time,
        ground_wind_speed_mph=ground_speed_mph,
        ground_wind_direction_deg=ground_direction_deg,
        model=profile.model,
        elevation=elevation,
        flight_path=flight_path,
        weathercock_distance_ft=_ground_distance_ft(launch_site, apogee_location),
        drift_distance_ft=_ground_distance_ft(launch_site, descent_path[-1].location),
    )
    logger.debug(
        "Simulated %s: landing %.5f, %.5f (%d ft drift)",
        result.hour_label,
        result.landing_point.location.latitude,
        result.landing_point.location.longitude,
        result.drift_distance_ft,
    )
    return DescentOutcome.ok(result)
