from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.service.checkout.domain.enum.payment_status import PaymentStatus


@attrs.define
class Payment:
    id: UUID
    order_id: UUID
    amount_charged: Decimal
    currency: str
    external_reference: str
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create_pending(
        cls,
        *,
        id: UUID,
        order_id: UUID,
        amount_charged: Decimal,
        currency: str,
        external_reference: str,
    ) -> 'Payment':
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            order_id=order_id,
            amount_charged=amount_charged,
            currency=currency,
            external_reference=external_reference,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
