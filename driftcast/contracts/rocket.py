"""Rocket recovery configuration and weathercock tables."""

from typing import Self

from pydantic import Field, model_validator

from driftcast.contracts.common import ContractModel


class RecoveryProfile(ContractModel):
    """Parachute descent rates, single or dual deployment.

    Single deployment: the main parachute opens at apogee.
    Dual deployment: a drogue from apogee down to ``main_deploy_altitude_ft``,
    then the main parachute to the ground.
    """

    main_descent_rate_fps: float = Field(..., gt=0, description="ft/s under main")
    dual_deployment: bool = False
    main_deploy_altitude_ft: float | None = Field(
        default=None, gt=0, description="ft AGL of the main event"
    )
    drogue_descent_rate_fps: float | None = Field(
        default=None, gt=0, description="ft/s under drogue"
    )

    @model_validator(mode="after")
    def validate_dual_deployment(self) -> Self:
        if self.dual_deployment:
            if self.main_deploy_altitude_ft is None:
                raise ValueError("Dual deployment requires a main deployment altitude")
            if self.drogue_descent_rate_fps is None:
                raise ValueError("Dual deployment requires a drogue descent rate")
        return self

    @property
    def apogee_descent_rate_fps(self) -> float:
        """Descent rate in effect right after apogee."""
        if self.dual_deployment:
            return self.drogue_descent_rate_fps  # type: ignore[return-value]
        return self.main_descent_rate_fps

    @classmethod
    def single(cls, main_descent_rate_fps: float) -> "RecoveryProfile":
        return cls(main_descent_rate_fps=main_descent_rate_fps)

    @classmethod
    def dual(
        cls,
        drogue_descent_rate_fps: float,
        main_deploy_altitude_ft: float,
        main_descent_rate_fps: float,
    ) -> "RecoveryProfile":
        return cls(
            main_descent_rate_fps=main_descent_rate_fps,
            dual_deployment=True,
            main_deploy_altitude_ft=main_deploy_altitude_ft,
            drogue_descent_rate_fps=drogue_descent_rate_fps,
        )


class RocketProfile(ContractModel):
    """Expected apogee and recovery configuration of one rocket."""

    apogee_ft: float = Field(..., gt=0, description="Expected apogee in ft AGL")
    recovery: RecoveryProfile

    @model_validator(mode="after")
    def validate_deploy_below_apogee(self) -> Self:
        deploy = self.recovery.main_deploy_altitude_ft
        if self.recovery.dual_deployment and deploy is not None and deploy >= self.apogee_ft:
            raise ValueError(
                f"Main deployment altitude ({deploy}) must be below apogee ({self.apogee_ft})"
            )
        return self


class WeathercockEntry(ContractModel):
    """Expected ascent result at one ground wind speed."""

    wind_speed_mph: float = Field(..., ge=0, description="Ground wind speed in mph")
    upwind_distance_ft: float = Field(
        ..., ge=0, description="Horizontal distance travelled into the wind by apogee"
    )
    apogee_ft: float = Field(..., gt=0, description="Resulting apogee in ft AGL")


class WeathercockModel(ContractModel):
    """Ground-wind-indexed table of weathercock results.

    An empty table means no adjustment is available. Otherwise the first
    entry is the 0 mph baseline (unperturbed apogee, no displacement).
    """

    entries: list[WeathercockEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_entries(self) -> Self:
        if not self.entries:
            return self

        if self.entries[0].wind_speed_mph != 0:
            raise ValueError(
                f"First weathercock entry must be at 0 mph, got {self.entries[0].wind_speed_mph}"
            )

        speeds = [e.wind_speed_mph for e in self.entries]
        for lower, upper in zip(speeds, speeds[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Weathercock wind speeds must be strictly ascending, got {speeds}"
                )
        return self

    @property
    def is_empty(self) -> bool:
        return not self.entries
