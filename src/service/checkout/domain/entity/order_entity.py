from datetime import datetime, timedelta, timezone
from decimal import Decimal
import secrets
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.ticket_entity import Ticket
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.ticket_status import TicketStatus
from src.service.checkout.domain.value_object.cart_item import CartItem


CENTS = Decimal('0.01')


@attrs.define
class OrderItem:
    id: UUID
    order_id: UUID
    offer_id: int
    event_id: int
    ticket_tier_id: int
    quantity: int
    unit_price: Decimal
    seat_id: Optional[int] = None

    @property
    def is_seat(self) -> bool:
        return self.seat_id is not None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@attrs.define
class Order:
    id: UUID
    user_id: int
    subtotal: Decimal
    service_fee: Decimal
    total_amount: Decimal
    currency: str
    expires_at: datetime
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItem] = attrs.field(factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @staticmethod
    def validate_cart(items: List[CartItem], *, max_items: int, max_tickets: int) -> None:
        """Reject a malformed cart before any inventory is touched."""
        if not items:
            raise DomainError('Order must contain at least one item')
        if len(items) > max_items:
            raise DomainError(f'Order cannot contain more than {max_items} items')

        seen_seats: set[tuple[int, int]] = set()
        for item in items:
            if item.quantity < 1:
                raise DomainError('Item quantity must be at least 1')
            if not item.is_seat:
                continue
            if item.quantity != 1:
                raise DomainError('A seat item must have quantity 1')
            key = (item.offer_id, item.seat_id)
            if key in seen_seats:
                raise DomainError(f'Seat {item.seat_id} is listed more than once')
            seen_seats.add(key)

        if sum(item.quantity for item in items) > max_tickets:
            raise DomainError(f'Maximum {max_tickets} tickets per order')

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        user_id: int,
        items: List[OrderItem],
        service_fee_per_ticket: Decimal,
        currency: str,
        expires_at: datetime,
        now: Optional[datetime] = None,
    ) -> 'Order':
        if not items:
            raise DomainError('Order must contain at least one item')

        subtotal = sum((item.line_total for item in items), Decimal('0')).quantize(CENTS)
        ticket_count = sum(item.quantity for item in items)
        service_fee = (service_fee_per_ticket * ticket_count).quantize(CENTS)

        now = now or datetime.now(timezone.utc)
        return cls(
            id=id,
            user_id=user_id,
            subtotal=subtotal,
            service_fee=service_fee,
            total_amount=subtotal + service_fee,
            currency=currency,
            expires_at=expires_at,
            status=OrderStatus.PENDING,
            items=items,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def expiry_from(now: datetime, *, window_minutes: int) -> datetime:
        return now + timedelta(minutes=window_minutes)

    @property
    def ticket_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def amount_in_minor_units(self) -> int:
        return int((self.total_amount * 100).to_integral_value())

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    def is_expired(self, *, now: datetime) -> bool:
        return self.expires_at < now

    def _ensure_pending(self, action: str) -> None:
        if not self.is_pending:
            raise DomainError(f'Cannot {action} order in status {self.status}')

    @Logger.io
    def complete(self, *, now: datetime) -> 'Order':
        self._ensure_pending('complete')
        return attrs.evolve(self, status=OrderStatus.COMPLETED, completed_at=now, updated_at=now)

    @Logger.io
    def cancel(self, *, now: datetime) -> 'Order':
        self._ensure_pending('cancel')
        return attrs.evolve(self, status=OrderStatus.CANCELLED, updated_at=now)

    @Logger.io
    def fail(self, *, now: datetime) -> 'Order':
        self._ensure_pending('fail')
        return attrs.evolve(self, status=OrderStatus.FAILED, updated_at=now)

    def issue_tickets(self, *, now: datetime) -> List[Ticket]:
        """One ticket per unit bought: `quantity` for a GA line, one for a seat line."""
        return [
            Ticket(
                id=uuid7(),
                order_id=self.id,
                user_id=self.user_id,
                event_id=item.event_id,
                ticket_tier_id=item.ticket_tier_id,
                seat_id=item.seat_id,
                price_paid=item.unit_price,
                redemption_code=secrets.token_urlsafe(16),
                status=TicketStatus.VALID,
                created_at=now,
            )
            for item in self.items
            for _ in range(item.quantity)
        ]
