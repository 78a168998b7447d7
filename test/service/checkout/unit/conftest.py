"""
Unit test configuration for the checkout service.

FakeUnitOfWork hands out AsyncMock repositories and records commit / rollback,
so use cases can be exercised without a database.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.checkout.domain.entity.offer_entity import Offer
from src.service.checkout.domain.entity.order_entity import Order, OrderItem


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self) -> None:
        self.inventory_ledger = AsyncMock()
        self.order_command_repo = AsyncMock()
        self.payment_command_repo = AsyncMock()
        self.ticket_command_repo = AsyncMock()
        self.offer_query_repo = AsyncMock()
        self.entered = 0
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> 'FakeUnitOfWork':
        self.entered += 1
        return self

    async def _commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


@pytest.fixture
def fake_uow(offers: dict[int, Offer]) -> FakeUnitOfWork:
    uow = FakeUnitOfWork()

    async def _get_offer(*, offer_id: int) -> Offer | None:
        return offers.get(offer_id)

    uow.offer_query_repo.get_by_id.side_effect = _get_offer
    return uow


@pytest.fixture
def offers() -> dict[int, Offer]:
    return {
        1: Offer(
            id=1,
            event_id=7,
            ticket_tier_id=1,
            name='General Admission',
            price=Decimal('20.00'),
            quantity_for_sale=100,
        ),
        2: Offer(
            id=2,
            event_id=7,
            ticket_tier_id=2,
            name='Floor Seat',
            price=Decimal('50.00'),
            quantity_for_sale=1,
        ),
    }


@pytest.fixture
def pending_order() -> Order:
    """Two GA tickets of offer 1 plus seat 101 of offer 2, owned by user 42"""
    order_id = uuid7()
    now = datetime.now(timezone.utc)
    return Order.create(
        id=order_id,
        user_id=42,
        items=[
            OrderItem(
                id=uuid7(),
                order_id=order_id,
                offer_id=1,
                event_id=7,
                ticket_tier_id=1,
                quantity=2,
                unit_price=Decimal('20.00'),
            ),
            OrderItem(
                id=uuid7(),
                order_id=order_id,
                offer_id=2,
                event_id=7,
                ticket_tier_id=2,
                quantity=1,
                unit_price=Decimal('50.00'),
                seat_id=101,
            ),
        ],
        service_fee_per_ticket=Decimal('2.50'),
        currency='usd',
        expires_at=now + timedelta(minutes=15),
        now=now,
    )
