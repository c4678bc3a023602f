"""Core schemas for the application."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")

# Decimal inside the service, plain JSON number on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]


def to_money(value: Any) -> Decimal:
    """Convert a stored or parsed amount to a two-place Decimal."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names to API clients."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class DeleteResult(BaseModel):
    """Schema for delete responses."""
    success: bool = True


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    detail: str
