"""
Order & entitlement ledger for VIP packages.

An order is created PENDING by ``create_order`` (the only insert path) and
receives its terminal status from the payment webhook. A SUCCESS order that
has not expired and still has ``remaining_posts`` is usable posting credit.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.constants import TERMINAL_ORDER_STATUSES, CompanyStatus, ErrorCode, OrderStatus
from jobboard.core.exceptions import ConflictError, NotFoundError
from jobboard.core.security import Actor
from jobboard.models.company import Company
from jobboard.models.order import CompanyVipPackage
from jobboard.models.vip_package import VipPackage
from jobboard.schemas.common import page_offset
from jobboard.utils.dates import expiry_after_days, utc_now

logger = structlog.get_logger(__name__)


class OrderService:
    """Order & Entitlement Ledger."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _company_id_for(self, actor: Actor) -> UUID:
        """Resolve the actor's company; only approved companies may purchase."""
        company_id = (
            await self.db.execute(
                select(Company.id).where(
                    Company.account_id == actor.account_id,
                    Company.status == CompanyStatus.APPROVED.value,
                )
            )
        ).scalar_one_or_none()
        if company_id is None:
            raise NotFoundError(message="Company not found")
        return company_id

    async def _load(self, *criteria) -> Optional[CompanyVipPackage]:
        result = await self.db.execute(
            select(CompanyVipPackage).where(*criteria).execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    async def create_order(
        self,
        actor: Actor,
        vip_package_id: UUID,
        now: Optional[datetime] = None,
    ) -> CompanyVipPackage:
        """Create a PENDING order for the actor's company.

        ``end_date`` is UTC midnight of ``now + duration_day`` and
        ``remaining_posts`` starts at the package's ``num_post``.
        """
        company_id = await self._company_id_for(actor)

        package = (
            await self.db.execute(
                select(VipPackage).where(VipPackage.id == vip_package_id, VipPackage.is_deleted.is_(False))
            )
        ).scalar_one_or_none()
        if package is None:
            raise NotFoundError(message="VIP package not found")

        order = CompanyVipPackage(
            company_id=company_id,
            vip_package_id=package.id,
            end_date=expiry_after_days(package.duration_day, now),
            remaining_posts=package.num_post,
            status=OrderStatus.PENDING.value,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info(
            "order_created",
            order_id=str(order.id),
            company_id=str(company_id),
            vip_package_id=str(package.id),
            end_date=order.end_date.isoformat(),
        )
        return await self.get_by_id(order.id)

    async def find(self, order_id: UUID) -> Optional[CompanyVipPackage]:
        return await self._load(CompanyVipPackage.id == order_id)

    async def get_by_id(self, order_id: UUID) -> CompanyVipPackage:
        order = await self.find(order_id)
        if order is None:
            raise NotFoundError(message="Order not found")
        return order

    async def get_order(self, actor: Actor, order_id: UUID) -> CompanyVipPackage:
        """Order with its package, visible only to the company that placed it."""
        order = await self._load(
            CompanyVipPackage.id == order_id,
            CompanyVipPackage.company_id.in_(select(Company.id).where(Company.account_id == actor.account_id)),
        )
        if order is None:
            raise NotFoundError(message="Order not found")
        return order

    async def list_orders(self, actor: Actor, page: int, size: int) -> Tuple[List[CompanyVipPackage], int]:
        criteria = [
            CompanyVipPackage.company_id.in_(select(Company.id).where(Company.account_id == actor.account_id))
        ]
        total = (
            await self.db.execute(select(func.count()).select_from(CompanyVipPackage).where(*criteria))
        ).scalar() or 0
        result = await self.db.execute(
            select(CompanyVipPackage)
            .where(*criteria)
            .order_by(CompanyVipPackage.created_at.desc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        return list(result.unique().scalars().all()), total

    async def finalize(self, order_id: UUID, status: OrderStatus) -> bool:
        """Move a PENDING order to a terminal status.

        Returns False when the order does not exist or is no longer PENDING;
        the row is never touched in that case.
        """
        if status not in TERMINAL_ORDER_STATUSES:
            raise ValueError(f"Not a terminal order status: {status}")
        result = await self.db.execute(
            update(CompanyVipPackage)
            .where(
                CompanyVipPackage.id == order_id,
                CompanyVipPackage.status == OrderStatus.PENDING.value,
            )
            .values(status=status.value)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    # ==================== Entitlements ====================

    def _usable_criteria(self, company_id: UUID, now: datetime) -> list:
        return [
            CompanyVipPackage.company_id == company_id,
            CompanyVipPackage.status == OrderStatus.SUCCESS.value,
            CompanyVipPackage.end_date > now,
            CompanyVipPackage.remaining_posts > 0,
        ]

    async def get_usable_entitlements(
        self, company_id: UUID, now: Optional[datetime] = None
    ) -> List[CompanyVipPackage]:
        """Paid, unexpired orders with credit left; best tier first, then soonest expiry."""
        now = now or utc_now()
        result = await self.db.execute(
            select(CompanyVipPackage)
            .join(VipPackage, VipPackage.id == CompanyVipPackage.vip_package_id)
            .where(*self._usable_criteria(company_id, now))
            .order_by(VipPackage.priority.desc(), CompanyVipPackage.end_date.asc())
        )
        return list(result.unique().scalars().all())

    async def get_entitlements_for(self, actor: Actor, now: Optional[datetime] = None) -> List[CompanyVipPackage]:
        return await self.get_usable_entitlements(await self._company_id_for(actor), now)

    async def consume_post_credit(self, company_id: UUID, now: Optional[datetime] = None) -> CompanyVipPackage:
        """Spend one job post from the company's best usable entitlement.

        The decrement is a conditional update, so a concurrent consumer that
        empties the order first makes this call retry on the next candidate.
        """
        now = now or utc_now()
        for candidate in await self.get_usable_entitlements(company_id, now):
            result = await self.db.execute(
                update(CompanyVipPackage)
                .where(CompanyVipPackage.id == candidate.id, *self._usable_criteria(company_id, now))
                .values(remaining_posts=CompanyVipPackage.remaining_posts - 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                await self.db.commit()
                logger.info("post_credit_consumed", order_id=str(candidate.id), company_id=str(company_id))
                return await self.get_by_id(candidate.id)

        raise ConflictError(ErrorCode.NO_AVAILABLE_POST_CREDIT, "No usable VIP package credit")
