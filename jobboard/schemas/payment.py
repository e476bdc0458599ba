"""Payment gateway webhook schemas."""

from decimal import Decimal
from typing import Optional

from jobboard.schemas.common import CamelModel


class SepayWebhookPayload(CamelModel):
    """Bank-transfer notification delivered by SePay.

    Only ``content``, ``transferType`` and ``transferAmount`` drive
    reconciliation; the rest is kept for logging.
    """

    content: str = ""
    transfer_type: str
    transfer_amount: Decimal
    id: Optional[int] = None
    gateway: Optional[str] = None
    reference_code: Optional[str] = None
    transaction_date: Optional[str] = None
