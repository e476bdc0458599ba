"""VIP package catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.deps import PageParams, get_db, get_page, require_admin
from jobboard.core.constants import MessageCode
from jobboard.core.security import Actor
from jobboard.schemas.common import ApiResponse, ListData, Pagination, ok, ok_list
from jobboard.schemas.vip_package import VipPackageIn, VipPackageResponse
from jobboard.services.vip_package_service import VipPackageService

router = APIRouter()
admin_router = APIRouter()


@router.get("/vip-packages", response_model=ApiResponse[ListData[VipPackageResponse]])
async def list_packages_for_company(db: AsyncSession = Depends(get_db)):
    """Purchasable packages, cheapest first, as a single page."""
    packages = await VipPackageService(db).list_for_company()
    return ok_list(
        [VipPackageResponse.model_validate(p) for p in packages],
        Pagination.single_page(len(packages)),
        MessageCode.GET_ALL_SUCCESS,
    )


@admin_router.get("/vip-packages", response_model=ApiResponse[ListData[VipPackageResponse]])
async def list_packages(
    search: str = Query(""),
    priority: str = Query(""),
    paging: PageParams = Depends(get_page),
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    packages, total = await VipPackageService(db).list_packages(
        paging.page, paging.size, search=search, priority=priority
    )
    return ok_list(
        [VipPackageResponse.model_validate(p) for p in packages],
        Pagination.build(total, paging.page, paging.size),
        MessageCode.GET_ALL_SUCCESS,
    )


@admin_router.get("/vip-package/{package_id}", response_model=ApiResponse[VipPackageResponse])
async def get_package(
    package_id: UUID,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    package = await VipPackageService(db).get(package_id)
    return ok(VipPackageResponse.model_validate(package), MessageCode.GET_SUCCESS)


@admin_router.post("/vip-package", response_model=ApiResponse[VipPackageResponse], status_code=status.HTTP_201_CREATED)
async def create_package(
    request: VipPackageIn,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    package = await VipPackageService(db).create(request)
    return ok(VipPackageResponse.model_validate(package), MessageCode.CREATED_SUCCESS)


@admin_router.put("/vip-package/{package_id}", response_model=ApiResponse[VipPackageResponse])
async def update_package(
    package_id: UUID,
    request: VipPackageIn,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace a package's terms; refused while it has active orders."""
    package = await VipPackageService(db).update(package_id, request)
    return ok(VipPackageResponse.model_validate(package), MessageCode.UPDATED_SUCCESS)


@admin_router.delete("/vip-package/{package_id}", response_model=ApiResponse[VipPackageResponse])
async def delete_package(
    package_id: UUID,
    _: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a package; refused while it has active orders."""
    package = await VipPackageService(db).delete(package_id)
    return ok(VipPackageResponse.model_validate(package), MessageCode.DELETED_SUCCESS)
