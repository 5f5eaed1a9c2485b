"""Forecast-collaborator exceptions."""


class ForecastError(Exception):
    """Base exception for forecast retrieval and normalization errors."""


class ForecastFormatError(ForecastError):
    """Raised when an upstream forecast payload cannot be normalized."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")
