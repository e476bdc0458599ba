"""Authentication schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from jobboard.schemas.common import CamelModel


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    """Login response schema."""

    id: UUID
    email: str
    role: str
    access_token: str
    token_type: str = "bearer"


class AccountIdRequest(BaseModel):
    """Body of the lock/unlock endpoints."""

    id: Optional[UUID] = None


class AccountResponse(CamelModel):
    """Account response schema."""

    id: UUID
    email: str
    role: str
    is_locked: bool
    created_at: datetime
