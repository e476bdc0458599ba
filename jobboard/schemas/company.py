"""Company schemas."""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, HttpUrl, field_validator

from jobboard.core.constants import CompanyStatus
from jobboard.schemas.common import CamelModel

PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).+$")


class ProvinceResponse(CamelModel):
    id: UUID
    name: str


class CompanyRegister(CamelModel):
    """Company self-registration (multipart form fields)."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=25)
    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = None
    address: str = Field(..., min_length=3)
    province_id: UUID
    website: Optional[HttpUrl] = None
    tax_code: str = Field(..., min_length=5)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not PASSWORD_REGEX.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                "one number, and one special character."
            )
        return v

    @field_validator("website", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CompanyProfileUpdate(CamelModel):
    """Fields an approved company may change about itself."""

    description: Optional[str] = None
    address: str = Field(..., min_length=3)
    province_id: UUID
    website: Optional[HttpUrl] = None

    @field_validator("website", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CompanyStatusChange(CamelModel):
    """Admin decision on a pending company."""

    status: CompanyStatus
    reason_reject: Optional[str] = None


class CompanyResponse(CamelModel):
    """Company response schema."""

    id: UUID
    account_id: UUID
    email: str
    name: str
    description: Optional[str] = None
    address: str
    website: Optional[str] = None
    logo: Optional[str] = None
    tax_code: str
    business_license_path: str
    status: int
    reason_reject: Optional[str] = None
    province: Optional[ProvinceResponse] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
