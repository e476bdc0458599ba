"""Payment gateway callbacks."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.deps import get_db
from jobboard.core.constants import MessageCode
from jobboard.core.exceptions import ValidationError
from jobboard.schemas.common import ApiResponse, ok
from jobboard.services.payment_service import PaymentReconciler

router = APIRouter()


@router.post("/sepay-callback", response_model=ApiResponse[None])
async def sepay_callback(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
):
    """SePay bank-transfer notification (``Authorization: Apikey <key>``).

    The body is read only after the caller has been authenticated.
    """
    reconciler = PaymentReconciler(db)
    reconciler.authenticate(authorization)

    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError(message="Request body is not valid JSON")

    await reconciler.handle_webhook(authorization, payload)
    return ok(None, MessageCode.UPDATED_SUCCESS)
