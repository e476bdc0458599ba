"""
Company lifecycle: registration, admin approval and profile updates.

Approval is a one-way state machine:

    PENDING --approve--> APPROVED
    PENDING --reject---> REJECTED   (reason required)

Every transition is a single ``UPDATE ... WHERE status = PENDING`` so two
reviewers racing on the same company cannot both win, and a terminal company
can never be reviewed again.
"""

from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from fastapi import UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.constants import CompanyStatus, ErrorCode, Role
from jobboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from jobboard.core.security import Actor, get_password_hash
from jobboard.models.account import Account
from jobboard.models.company import Company
from jobboard.models.province import Province
from jobboard.schemas.company import CompanyProfileUpdate, CompanyRegister
from jobboard.schemas.common import page_offset
from jobboard.services.storage_service import LocalFileStorage
from jobboard.utils.helpers import escape_like

logger = structlog.get_logger(__name__)

REVIEW_FILTERS = {
    "all": (CompanyStatus.PENDING, CompanyStatus.REJECTED),
    "pending": (CompanyStatus.PENDING,),
    "rejected": (CompanyStatus.REJECTED,),
}


class CompanyService:
    """Company Lifecycle Manager."""

    def __init__(self, db: AsyncSession, storage: Optional[LocalFileStorage] = None):
        self.db = db
        self.storage = storage

    # ==================== Lookups ====================

    async def _load(self, *criteria) -> Optional[Company]:
        result = await self.db.execute(
            select(Company).where(*criteria).execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    async def get_by_id(self, company_id: UUID) -> Company:
        company = await self._load(Company.id == company_id)
        if company is None:
            raise NotFoundError(message="Company not found")
        return company

    async def get_for_account(self, account_id: UUID, approved_only: bool = False) -> Company:
        criteria = [Company.account_id == account_id]
        if approved_only:
            criteria.append(Company.status == CompanyStatus.APPROVED.value)
        company = await self._load(*criteria)
        if company is None:
            raise NotFoundError(message="Company not found")
        return company

    async def get_verification_status(self, email: Optional[str]) -> Company:
        """Public lookup of a company's approval status by email."""
        if not email or not email.strip():
            raise ValidationError(ErrorCode.EMAIL_REQUIRED, "Email is required")
        company = await self._load(Company.email == email.strip())
        if company is None:
            raise NotFoundError(message="Company not found")
        return company

    async def list_for_review(
        self,
        page: int,
        size: int,
        search: str = "",
        province: str = "",
        status: str = "all",
    ) -> Tuple[List[Company], int]:
        """Pending and rejected companies for the admin review queue."""
        statuses = REVIEW_FILTERS.get(status.strip().lower(), REVIEW_FILTERS["all"])
        criteria = [Company.status.in_([s.value for s in statuses])]

        search = search.strip().lower()
        if search:
            term = f"%{escape_like(search)}%"
            criteria.append(
                or_(
                    func.lower(Company.email).like(term, escape="\\"),
                    func.lower(Company.name).like(term, escape="\\"),
                )
            )

        province = province.strip().lower()
        if province:
            criteria.append(
                Company.province_id.in_(
                    select(Province.id).where(
                        func.lower(Province.name).like(f"%{escape_like(province)}%", escape="\\")
                    )
                )
            )

        total = (
            await self.db.execute(select(func.count()).select_from(Company).where(*criteria))
        ).scalar() or 0

        result = await self.db.execute(
            select(Company)
            .where(*criteria)
            .order_by(Company.created_at.desc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        return list(result.unique().scalars().all()), total

    # ==================== Registration ====================

    async def _ensure_province(self, province_id: UUID) -> None:
        result = await self.db.execute(select(Province.id).where(Province.id == province_id))
        if result.scalar_one_or_none() is None:
            raise ValidationError.for_field("provinceId", "Province not found")

    async def register(
        self,
        form: dict,
        business_license: Optional[UploadFile],
        logo: Optional[UploadFile],
    ) -> Company:
        """Create a COMPANY account and its PENDING company profile.

        Files are stored first; if anything afterwards fails they are removed
        again before the error propagates.
        """
        uploaded: List[str] = []
        try:
            if business_license is None:
                raise ValidationError.for_field("businessLicense", "File is required")
            if logo is None:
                raise ValidationError.for_field("logo", "File is required")
            uploaded.append(await self.storage.save(business_license, "licenses", "businessLicense"))
            uploaded.append(await self.storage.save(logo, "logos", "logo"))

            try:
                data = CompanyRegister.model_validate(form)
            except PydanticValidationError as e:
                raise ValidationError.from_errors(e.errors())

            await self._ensure_province(data.province_id)

            existing = await self.db.execute(select(Account.id).where(Account.email == data.email))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(ErrorCode.EMAIL_ALREADY_EXISTS, "Email already registered")

            account = Account(
                email=data.email,
                password_hash=get_password_hash(data.password),
                role=Role.COMPANY.value,
            )
            self.db.add(account)
            await self.db.flush()

            company = Company(
                account_id=account.id,
                email=data.email,
                name=data.name,
                description=data.description,
                address=data.address,
                province_id=data.province_id,
                website=str(data.website) if data.website else None,
                tax_code=data.tax_code,
                business_license_path=uploaded[0],
                logo=uploaded[1],
                status=CompanyStatus.PENDING.value,
                reason_reject=None,
            )
            self.db.add(company)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            self._discard(uploaded)
            raise

        logger.info("company_registered", company_id=str(company.id), email=company.email)
        return await self.get_by_id(company.id)

    # ==================== Approval ====================

    async def transition_status(
        self,
        company_id: UUID,
        new_status: CompanyStatus,
        reason_reject: Optional[str] = None,
    ) -> Company:
        """Approve or reject a PENDING company.

        Raises ``ValidationError`` for a non-terminal target or a rejection
        without reason, ``NotFoundError`` when no PENDING company has this id.
        """
        new_status = CompanyStatus(new_status)
        if new_status is CompanyStatus.PENDING:
            raise ValidationError.for_field("status", "Status must be APPROVED or REJECTED", ErrorCode.INVALID_STATUS)

        reason = (reason_reject or "").strip()
        if new_status is CompanyStatus.REJECTED and not reason:
            raise ValidationError.for_field(
                "reasonReject",
                "Reason for rejection is required when rejecting a company",
                ErrorCode.REASON_REJECT_REQUIRED,
            )

        result = await self.db.execute(
            update(Company)
            .where(Company.id == company_id, Company.status == CompanyStatus.PENDING.value)
            .values(
                status=new_status.value,
                reason_reject=reason if new_status is CompanyStatus.REJECTED else None,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(message="No pending company with this id")
        await self.db.commit()

        logger.info("company_status_changed", company_id=str(company_id), status=new_status.name)
        return await self.get_by_id(company_id)

    # ==================== Self-service ====================

    async def update_profile(self, actor: Actor, form: dict, logo: Optional[UploadFile] = None) -> Company:
        """Update description/address/province/website/logo of an APPROVED company.

        A logo uploaded as part of this request is deleted again if the update
        fails for any reason; the previous logo is removed after success.
        """
        new_logo: Optional[str] = None
        try:
            if logo is not None:
                new_logo = await self.storage.save(logo, "logos", "logo")

            try:
                data = CompanyProfileUpdate.model_validate(form)
            except PydanticValidationError as e:
                raise ValidationError.from_errors(e.errors())

            company = await self.get_for_account(actor.account_id, approved_only=True)
            await self._ensure_province(data.province_id)

            previous_logo = company.logo
            company.description = data.description
            company.address = data.address
            company.province_id = data.province_id
            company.website = str(data.website) if data.website else None
            if new_logo:
                company.logo = new_logo
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            if new_logo:
                self._discard([new_logo])
            raise

        if new_logo and previous_logo and previous_logo != new_logo:
            self._discard([previous_logo])

        logger.info("company_profile_updated", company_id=str(company.id), logo_replaced=bool(new_logo))
        return await self.get_by_id(company.id)

    def _discard(self, uris: List[str]) -> None:
        """Best-effort removal of stored uploads; failures are only logged."""
        for uri in uris:
            if not self.storage.delete(uri):
                logger.warning("orphaned_upload_left", uri=uri)
