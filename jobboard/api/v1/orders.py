"""VIP package orders and entitlements of the calling company."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.deps import PageParams, get_db, get_page, require_company
from jobboard.core.constants import MessageCode
from jobboard.core.security import Actor
from jobboard.schemas.common import ApiResponse, ListData, Pagination, ok, ok_list
from jobboard.schemas.vip_package import OrderCreate, OrderDetailResponse
from jobboard.services.order_service import OrderService

router = APIRouter()


@router.post("/order", response_model=ApiResponse[OrderDetailResponse], status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreate,
    actor: Actor = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Place a PENDING order; it is paid by bank transfer quoting the order id."""
    order = await OrderService(db).create_order(actor, request.vip_package_id)
    return ok(OrderDetailResponse.model_validate(order), MessageCode.CREATED_SUCCESS)


@router.get("/order/{order_id}", response_model=ApiResponse[OrderDetailResponse])
async def get_order(
    order_id: UUID,
    actor: Actor = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    order = await OrderService(db).get_order(actor, order_id)
    return ok(OrderDetailResponse.model_validate(order), MessageCode.GET_SUCCESS)


@router.get("/orders", response_model=ApiResponse[ListData[OrderDetailResponse]])
async def list_orders(
    paging: PageParams = Depends(get_page),
    actor: Actor = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    orders, total = await OrderService(db).list_orders(actor, paging.page, paging.size)
    return ok_list(
        [OrderDetailResponse.model_validate(o) for o in orders],
        Pagination.build(total, paging.page, paging.size),
        MessageCode.GET_ALL_SUCCESS,
    )


@router.get("/entitlements", response_model=ApiResponse[ListData[OrderDetailResponse]])
async def list_entitlements(
    actor: Actor = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Paid, unexpired orders with post credits left, in consumption order."""
    orders = await OrderService(db).get_entitlements_for(actor)
    return ok_list(
        [OrderDetailResponse.model_validate(o) for o in orders],
        Pagination.single_page(len(orders)),
        MessageCode.GET_ALL_SUCCESS,
    )
