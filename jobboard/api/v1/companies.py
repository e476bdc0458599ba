"""Company registration, self-service and admin review endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.deps import PageParams, get_db, get_page, get_storage, require_admin, require_company
from jobboard.core.constants import MessageCode
from jobboard.core.security import Actor
from jobboard.schemas.common import ApiResponse, ListData, Pagination, ok, ok_list
from jobboard.schemas.company import CompanyResponse, CompanyStatusChange
from jobboard.services.company_service import CompanyService
from jobboard.services.storage_service import LocalFileStorage

router = APIRouter()
admin_router = APIRouter()


def _form(**fields) -> dict:
    """Multipart fields keyed by their JSON names; absent fields are left out."""
    return {key: value for key, value in fields.items() if value is not None}


@router.post("/register", response_model=ApiResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
async def register_company(
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    province_id: Optional[str] = Form(None, alias="provinceId"),
    website: Optional[str] = Form(None),
    tax_code: Optional[str] = Form(None, alias="taxCode"),
    business_license: Optional[UploadFile] = File(None, alias="businessLicense"),
    logo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Register a company account; the company starts PENDING review."""
    form = _form(
        email=email,
        password=password,
        name=name,
        description=description,
        address=address,
        provinceId=province_id,
        website=website,
        taxCode=tax_code,
    )
    company = await CompanyService(db, storage).register(form, business_license, logo)
    return ok(CompanyResponse.model_validate(company), MessageCode.CREATED_SUCCESS)


@router.get("/verification-status", response_model=ApiResponse[CompanyResponse])
async def get_verification_status(
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Public lookup of a company's review status by email."""
    company = await CompanyService(db).get_verification_status(email)
    return ok(CompanyResponse.model_validate(company), MessageCode.GET_SUCCESS)


@router.put("/profile", response_model=ApiResponse[CompanyResponse])
async def update_profile(
    description: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    province_id: Optional[str] = Form(None, alias="provinceId"),
    website: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    actor: Actor = Depends(require_company),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Update the calling company's profile (approved companies only)."""
    form = _form(description=description, address=address, provinceId=province_id, website=website)
    company = await CompanyService(db, storage).update_profile(actor, form, logo)
    return ok(CompanyResponse.model_validate(company), MessageCode.UPDATED_SUCCESS)


# ==================== Admin ====================


@admin_router.get("/companies/review", response_model=ApiResponse[ListData[CompanyResponse]])
async def list_companies_for_review(
    search: str = Query(""),
    province: str = Query(""),
    status_filter: str = Query("all", alias="status"),
    paging: PageParams = Depends(get_page),
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Pending and rejected companies awaiting an admin decision."""
    companies, total = await CompanyService(db).list_for_review(
        paging.page, paging.size, search=search, province=province, status=status_filter
    )
    return ok_list(
        [CompanyResponse.model_validate(c) for c in companies],
        Pagination.build(total, paging.page, paging.size),
        MessageCode.GET_ALL_SUCCESS,
    )


@admin_router.get("/company/{company_id}", response_model=ApiResponse[CompanyResponse])
async def get_company(
    company_id: UUID,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Company detail in any status."""
    company = await CompanyService(db).get_by_id(company_id)
    return ok(CompanyResponse.model_validate(company), MessageCode.GET_SUCCESS)


@admin_router.patch("/company/{company_id}/change-status", response_model=ApiResponse[CompanyResponse])
async def change_company_status(
    company_id: UUID,
    request: CompanyStatusChange,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending company."""
    company = await CompanyService(db).transition_status(company_id, request.status, request.reason_reject)
    return ok(CompanyResponse.model_validate(company), MessageCode.UPDATED_SUCCESS)
