"""Account authentication and admin lock management."""

from typing import Tuple
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.constants import CompanyStatus, ErrorCode, Role
from jobboard.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from jobboard.core.security import create_access_token, verify_password
from jobboard.models.account import Account
from jobboard.models.company import Company

logger = structlog.get_logger(__name__)


class AccountService:
    """Account/Identity store."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, account_id: UUID) -> Account:
        result = await self.db.execute(
            select(Account).where(Account.id == account_id).execution_options(populate_existing=True)
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise NotFoundError(message="Account not found")
        return account

    async def login(self, email: str, password: str) -> Tuple[Account, str]:
        """Check credentials and issue an access token.

        Locked accounts are refused, and company accounts only get a token
        once their company has been approved.
        """
        result = await self.db.execute(select(Account).where(Account.email == email.strip()))
        account = result.scalar_one_or_none()

        if account is None or not verify_password(password, account.password_hash):
            logger.info("login_failed", email=email.strip())
            raise UnauthorizedError(
                ErrorCode.INVALID_CREDENTIALS,
                "Incorrect email or password",
                errors=[{"field": "email", "error_code": "invalid email or password"}],
            )

        if account.is_locked:
            raise ForbiddenError(ErrorCode.ACCOUNT_IS_LOCKED, "Account is locked")

        if account.role == Role.COMPANY.value:
            company_status = (
                await self.db.execute(select(Company.status).where(Company.account_id == account.id))
            ).scalar_one_or_none()
            if company_status is None:
                raise NotFoundError(message="Company not found")
            if company_status != CompanyStatus.APPROVED.value:
                raise ForbiddenError(ErrorCode.COMPANY_NOT_APPROVED, "Company has not been approved")

        token = create_access_token({"sub": str(account.id), "role": account.role})
        logger.info("login_succeeded", account_id=str(account.id), role=account.role)
        return account, token

    async def set_locked(self, account_id: UUID, locked: bool) -> Account:
        """Lock or unlock an account."""
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(is_locked=locked)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(message="Account not found")
        await self.db.commit()
        logger.info("account_lock_changed", account_id=str(account_id), is_locked=locked)
        return await self.get(account_id)
