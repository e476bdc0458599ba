"""VIP package catalog (admin managed, soft-deleted)."""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.constants import ErrorCode, VipPackageLevel
from jobboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from jobboard.models.order import CompanyVipPackage
from jobboard.models.vip_package import VipPackage
from jobboard.schemas.common import page_offset
from jobboard.schemas.vip_package import VipPackageIn
from jobboard.utils.dates import utc_now
from jobboard.utils.helpers import escape_like

logger = structlog.get_logger(__name__)


class VipPackageService:
    """VIP Package Catalog."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, package_id: UUID) -> VipPackage:
        """Fetch a package that has not been soft-deleted."""
        result = await self.db.execute(
            select(VipPackage)
            .where(VipPackage.id == package_id, VipPackage.is_deleted.is_(False))
            .execution_options(populate_existing=True)
        )
        package = result.scalar_one_or_none()
        if package is None:
            raise NotFoundError(message="VIP package not found")
        return package

    async def has_active_orders(self, package_id: UUID, now: Optional[datetime] = None) -> bool:
        """True while any order of this package has not reached its end date."""
        now = now or utc_now()
        count = (
            await self.db.execute(
                select(func.count())
                .select_from(CompanyVipPackage)
                .where(CompanyVipPackage.vip_package_id == package_id, CompanyVipPackage.end_date > now)
            )
        ).scalar()
        return bool(count)

    async def _ensure_not_in_use(self, package_id: UUID, now: Optional[datetime]) -> None:
        if await self.has_active_orders(package_id, now):
            raise ConflictError(
                ErrorCode.CANNOT_UPDATE_ACTIVE_PACKAGE,
                "Package has active orders",
                status_code=400,
            )

    async def create(self, data: VipPackageIn) -> VipPackage:
        package = VipPackage(
            name=data.name,
            description=data.description,
            num_post=data.num_post,
            price=data.price,
            duration_day=data.duration_day,
            priority=VipPackageLevel(data.priority).value,
        )
        self.db.add(package)
        await self.db.commit()
        logger.info("vip_package_created", package_id=str(package.id), priority=package.priority)
        return await self.get(package.id)

    async def update(self, package_id: UUID, data: VipPackageIn, now: Optional[datetime] = None) -> VipPackage:
        """Replace a package's terms; refused while any order is still active."""
        package = await self.get(package_id)
        await self._ensure_not_in_use(package_id, now)

        package.name = data.name
        package.description = data.description
        package.num_post = data.num_post
        package.price = data.price
        package.duration_day = data.duration_day
        package.priority = VipPackageLevel(data.priority).value
        await self.db.commit()

        logger.info("vip_package_updated", package_id=str(package_id))
        return await self.get(package_id)

    async def delete(self, package_id: UUID, now: Optional[datetime] = None) -> VipPackage:
        """Soft-delete a package; refused while any order is still active."""
        package = await self.get(package_id)
        await self._ensure_not_in_use(package_id, now)

        package.is_deleted = True
        await self.db.commit()

        logger.info("vip_package_deleted", package_id=str(package_id))
        return package

    async def list_packages(
        self,
        page: int,
        size: int,
        search: str = "",
        priority: str = "",
    ) -> Tuple[List[VipPackage], int]:
        """Admin listing with name search and tier filter, newest first."""
        criteria = [VipPackage.is_deleted.is_(False)]

        search = search.strip().lower()
        if search:
            criteria.append(func.lower(VipPackage.name).like(f"%{escape_like(search)}%", escape="\\"))

        if priority.strip():
            try:
                criteria.append(VipPackage.priority == VipPackageLevel.from_label(priority).value)
            except ValueError as e:
                raise ValidationError.for_field("priority", str(e))

        total = (
            await self.db.execute(select(func.count()).select_from(VipPackage).where(*criteria))
        ).scalar() or 0

        result = await self.db.execute(
            select(VipPackage)
            .where(*criteria)
            .order_by(VipPackage.created_at.desc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        return list(result.scalars().all()), total

    async def list_for_company(self) -> List[VipPackage]:
        """Every purchasable package, cheapest first."""
        result = await self.db.execute(
            select(VipPackage).where(VipPackage.is_deleted.is_(False)).order_by(VipPackage.price.asc())
        )
        return list(result.scalars().all())
