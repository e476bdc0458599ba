"""
SePay webhook reconciliation.

The gateway posts every bank transfer to our account. The order reference is
the third whitespace-separated word of the transfer memo: the order UUID with
its hyphens stripped (banks drop punctuation), e.g.

    "CONG TY ABC a1b2c3d4e5f67890a1b2c3d4e5f67890 thanh toan"

A transfer pays an order iff it is inbound and its amount equals the package
price exactly. Orders only ever leave PENDING once, so redelivered callbacks
cannot flip an order that is already SUCCESS or FAILED.
"""

import hmac
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.core.constants import ErrorCode, OrderStatus
from jobboard.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from jobboard.models.order import CompanyVipPackage
from jobboard.schemas.payment import SepayWebhookPayload
from jobboard.services.order_service import OrderService
from jobboard.utils.helpers import normalize_uuid

logger = structlog.get_logger(__name__)

AUTH_SCHEME = "Apikey "
REFERENCE_TOKEN_INDEX = 2


def extract_order_reference(content: Optional[str]) -> Optional[str]:
    """Order id (canonical UUID string) carried by a transfer memo, or None.

    The id is expected as the third word. Memos typed by hand sometimes carry
    a longer prefix ("CONG TY ABC <id> ..."), so later words are tried in
    order when the third one is not a 32-digit hex id.
    """
    for token in (content or "").split()[REFERENCE_TOKEN_INDEX:]:
        reference = normalize_uuid(token)
        if reference is None:
            continue
        try:
            UUID(reference)
        except ValueError:
            # 32 alphanumerics that are not hex
            continue
        return reference
    return None


def amounts_match(transfer_amount, price) -> bool:
    """Exact numeric equality between the transferred amount and the price."""
    try:
        return Decimal(str(transfer_amount)) == Decimal(str(price))
    except (InvalidOperation, ValueError):
        return False


@dataclass
class ReconcileResult:
    order_id: UUID
    status: OrderStatus


class PaymentReconciler:
    """Payment Webhook Reconciler."""

    def __init__(self, db: AsyncSession, api_key: Optional[str] = None):
        self.db = db
        self.api_key = settings.SEPAY_API_KEY if api_key is None else api_key
        self.orders = OrderService(db)

    def authenticate(self, authorization: Optional[str]) -> None:
        """Require ``Authorization: Apikey <SEPAY_API_KEY>``."""
        if not authorization or not authorization.startswith(AUTH_SCHEME):
            raise UnauthorizedError(ErrorCode.UNAUTHORIZED, "Missing Apikey authorization")

        token = authorization[len(AUTH_SCHEME):].strip()
        if not token or not self.api_key or not hmac.compare_digest(token, self.api_key):
            raise UnauthorizedError(ErrorCode.TOKEN_REQUIRED, "Invalid API key")

    async def _find_order(self, reference: Optional[str]) -> Optional[CompanyVipPackage]:
        if reference is None:
            return None
        return await self.orders.find(UUID(reference))

    async def handle_webhook(
        self,
        authorization: Optional[str],
        payload: Union[dict, SepayWebhookPayload],
    ) -> ReconcileResult:
        """Authenticate, match and settle one transfer notification.

        Raises ``ValidationError`` when the transfer does not pay the
        referenced order (which is then marked FAILED if it was PENDING) and
        ``ConflictError`` when a valid payment arrives for an order that has
        already failed.
        """
        self.authenticate(authorization)

        if not isinstance(payload, SepayWebhookPayload):
            try:
                payload = SepayWebhookPayload.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError.from_errors(e.errors())

        reference = extract_order_reference(payload.content)
        order = await self._find_order(reference)

        log = logger.bind(
            reference=reference,
            transfer_type=payload.transfer_type,
            transfer_amount=str(payload.transfer_amount),
            gateway_transaction_id=payload.id,
        )

        accepted = (
            payload.transfer_type == "in"
            and order is not None
            and amounts_match(payload.transfer_amount, order.vip_package.price)
        )
        target = OrderStatus.SUCCESS if accepted else OrderStatus.FAILED

        if order is None:
            log.warning("payment_webhook_order_not_found")
            raise ValidationError(message="No order matches the transfer content")

        if await self.orders.finalize(order.id, target):
            current = target
            log.info("payment_webhook_settled", order_id=str(order.id), status=target.value)
        else:
            current = OrderStatus((await self.orders.get_by_id(order.id)).status)
            if current is target:
                log.info("payment_webhook_redelivered", order_id=str(order.id), status=current.value)
            else:
                log.warning(
                    "payment_webhook_conflicting_redelivery",
                    order_id=str(order.id),
                    current_status=current.value,
                    requested_status=target.value,
                )

        if not accepted:
            raise ValidationError(message="Transfer does not match the order")

        if current is not OrderStatus.SUCCESS:
            raise ConflictError(ErrorCode.ORDER_ALREADY_FINALIZED, "Order has already been finalized")

        return ReconcileResult(order_id=order.id, status=current)
