"""
Accounts API schemas - Pydantic models for request/response.
"""

from datetime import datetime

from ninja import Schema
from pydantic import EmailStr, Field

from apps.core.schemas import RequiredStr

# --- Request Schemas ---


class CreateUserRequest(Schema):
    """Request to create a user inside an organization."""

    username: RequiredStr = Field(..., examples=["jdoe"])
    email: EmailStr = Field(..., examples=["jdoe@acme.com"])
    password: str = Field(..., min_length=6, description="Plaintext; hashed before storage")
    organization_id: int = Field(..., gt=0)


# --- Response Schemas ---


class UserResponse(Schema):
    """Created user. Never includes the password hash."""

    id: int
    username: str
    email: str
    organization_id: int
    created_at: datetime
