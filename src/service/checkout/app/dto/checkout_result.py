from typing import List, Optional

import attrs

from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.entity.ticket_entity import Ticket


@attrs.frozen
class CheckoutResult:
    order: Order
    client_secret: str = attrs.field(repr=False)


@attrs.frozen
class OrderDetail:
    order: Order
    payment: Optional[Payment] = None
    tickets: List[Ticket] = attrs.field(factory=list)


@attrs.frozen
class ReapResult:
    expired_orders: int = 0
    released_locks: int = 0
