"""VIP package and order schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from jobboard.core.constants import VipPackageLevel
from jobboard.schemas.common import CamelModel


class VipPackageIn(CamelModel):
    """Create/update payload; ``priority`` is a tier label (BASIC..DIAMOND)."""

    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    num_post: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=1000)
    duration_day: int = Field(..., ge=1)
    priority: VipPackageLevel

    @field_validator("priority", mode="before")
    @classmethod
    def parse_level(cls, v):
        if isinstance(v, VipPackageLevel):
            return v
        if isinstance(v, str):
            return VipPackageLevel.from_label(v)
        raise ValueError("Invalid VIP package level")


class VipPackageResponse(CamelModel):
    id: UUID
    name: str
    description: str
    num_post: int
    price: float
    duration_day: int
    priority: int
    level: str
    is_deleted: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrderCreate(CamelModel):
    vip_package_id: UUID


class OrderResponse(CamelModel):
    id: UUID
    company_id: UUID
    vip_package_id: UUID
    end_date: datetime
    remaining_posts: int
    status: str
    created_at: datetime


class OrderDetailResponse(OrderResponse):
    vip_package: VipPackageResponse
