"""
Core schemas - shared Pydantic types for API requests and responses.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

# Two-decimal money value, strictly positive (payments, refunds).
PositiveAmount = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]

# Two-decimal money value that may be zero (plan prices).
NonNegativeAmount = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]

# Required, whitespace-trimmed text.
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# ISO-4217 style currency code.
CurrencyCode = Annotated[
    str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=3, max_length=3)
]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    detail: str = Field(..., description="Human-readable error message")

    model_config = {"json_schema_extra": {"example": {"detail": "Invoice is already paid"}}}
