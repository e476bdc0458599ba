"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.deps import get_current_actor, get_db, require_admin
from jobboard.core.constants import ErrorCode, MessageCode
from jobboard.core.exceptions import ValidationError
from jobboard.core.security import Actor
from jobboard.schemas.auth import AccountIdRequest, AccountResponse, LoginRequest, LoginResponse
from jobboard.schemas.common import ApiResponse, ok
from jobboard.services.account_service import AccountService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    account, token = await AccountService(db).login(request.email, request.password)
    return ok(
        LoginResponse(id=account.id, email=account.email, role=account.role, access_token=token),
        MessageCode.LOGIN_SUCCESS,
    )


@router.get("/me", response_model=ApiResponse[AccountResponse])
async def get_me(actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    """Get current account information."""
    account = await AccountService(db).get(actor.account_id)
    return ok(AccountResponse.model_validate(account), MessageCode.GET_SUCCESS)


async def _set_locked(request: AccountIdRequest, locked: bool, actor: Actor, db: AsyncSession) -> dict:
    if request.id is None:
        raise ValidationError.for_field("id", "Account id is required", ErrorCode.ID_REQUIRED)
    account = await AccountService(db).set_locked(request.id, locked)
    logger.info("account_lock_requested", admin_id=str(actor.account_id), account_id=str(account.id), locked=locked)
    return ok(AccountResponse.model_validate(account), MessageCode.UPDATED_SUCCESS)


@router.patch("/lock-account", response_model=ApiResponse[AccountResponse])
async def lock_account(
    request: AccountIdRequest,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Lock an account (admin only)."""
    return await _set_locked(request, True, actor, db)


@router.patch("/unlock-account", response_model=ApiResponse[AccountResponse])
async def unlock_account(
    request: AccountIdRequest,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Unlock an account (admin only)."""
    return await _set_locked(request, False, actor, db)
