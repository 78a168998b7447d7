from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.service.checkout.domain.enum.ticket_status import TicketStatus


@attrs.define
class Ticket:
    id: UUID
    order_id: UUID
    user_id: int
    event_id: int
    ticket_tier_id: int
    price_paid: Decimal
    redemption_code: str = attrs.field(repr=False)
    seat_id: Optional[int] = None
    status: TicketStatus = TicketStatus.VALID
    created_at: Optional[datetime] = None
