"""Generic simulation outcome wrapper."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from driftcast.contracts.enums import FailureCode, SimulationState

T = TypeVar("T")


class SimulationError(BaseModel):
    """Structured reason a simulation produced no result."""

    code: FailureCode = Field(..., description="Machine-readable failure code")
    message: str = Field(..., description="Human-readable explanation")
    state: SimulationState = Field(
        ..., description="Stage during which the simulation failed"
    )
    details: dict[str, str | int | float | bool | None] | None = None


class SimulationOutcome(BaseModel, Generic[T]):
    """Result of one simulation attempt.

    On success: ``data`` is populated.
    On failure: ``error`` explains which stage failed and why.
    Failures are expected during a batch and are never raised.
    """

    success: bool
    data: T | None = None
    error: SimulationError | None = None

    @classmethod
    def ok(cls, data: T) -> "SimulationOutcome[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        code: FailureCode,
        message: str,
        state: SimulationState,
        **details: str | int | float | bool | None,
    ) -> "SimulationOutcome[T]":
        return cls(
            success=False,
            error=SimulationError(
                code=code, message=message, state=state, details=details or None
            ),
        )
