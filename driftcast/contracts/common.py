"""Base classes and shared types for DriftCast contracts.

Unit conventions (all contracts):
- **Altitudes**: feet above ground level — suffix ``_ft``
- **Wind speeds**: knots — suffix ``_kt`` (user-facing ground wind in ``_mph``)
- **Descent rates**: feet per second — suffix ``_fps``
- **Headings/bearings**: degrees from true north, clockwise — suffix ``_deg``
- **Geodesic distances**: meters — suffix ``_m``
- **Coordinates**: WGS84 decimal degrees on a spherical Earth

Wind directions always describe where the wind blows *from*.
"""

from pydantic import BaseModel, ConfigDict, Field


class ContractModel(BaseModel):
    """Base model for every DriftCast value object.

    - Frozen: a contract never changes after construction.
    - NaN and infinities are rejected instead of propagating through the math.
    """

    model_config = ConfigDict(
        frozen=True,
        allow_inf_nan=False,
        populate_by_name=True,
        use_enum_values=True,
    )


class GeoPoint(ContractModel):
    """WGS84 geographic coordinate."""

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
