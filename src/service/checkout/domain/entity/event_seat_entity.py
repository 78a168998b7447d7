from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.checkout.domain.enum.seat_status import SeatStatus


@attrs.define
class EventSeat:
    event_id: int
    seat_id: int
    ticket_tier_id: int
    status: SeatStatus = SeatStatus.AVAILABLE
    lock_expires_at: Optional[datetime] = None
    order_id: Optional[UUID] = None

    def is_locked_at(self, now: datetime) -> bool:
        return (
            self.status == SeatStatus.LOCKED
            and self.lock_expires_at is not None
            and self.lock_expires_at > now
        )
