"""
Inventory Ledger (PostgreSQL)

Each operation is one conditional UPDATE. The WHERE clause carries the guard, so
two transactions racing for the last unit or the same seat serialize on the row
lock and the loser re-evaluates the guard against the committed row.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import (
    DomainError,
    InsufficientInventoryError,
    NotFoundError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_inventory_ledger import IInventoryLedger
from src.service.checkout.domain.entity.event_seat_entity import EventSeat
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.seat_status import SeatStatus
from src.service.checkout.driven_adapter.model.entity_mapper import event_seat_to_entity
from src.service.checkout.driven_adapter.model.event_seat_model import EventSeatModel
from src.service.checkout.driven_adapter.model.offer_model import OfferModel
from src.service.checkout.driven_adapter.model.order_model import OrderModel


class InventoryLedgerImpl(IInventoryLedger):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _execute_guarded(self, stmt) -> int:  # type: ignore[no-untyped-def]
        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def reserve_general_admission(self, *, offer_id: int, quantity: int) -> None:
        rowcount = await self._execute_guarded(
            update(OfferModel)
            .where(
                OfferModel.id == offer_id,
                OfferModel.quantity_for_sale - OfferModel.quantity_sold >= quantity,
            )
            .values(quantity_sold=OfferModel.quantity_sold + quantity)
        )
        if rowcount == 0:
            raise InsufficientInventoryError('Not enough tickets available for this offer.')

    @Logger.io
    async def release_general_admission(self, *, offer_id: int, quantity: int) -> None:
        rowcount = await self._execute_guarded(
            update(OfferModel)
            .where(OfferModel.id == offer_id, OfferModel.quantity_sold >= quantity)
            .values(quantity_sold=OfferModel.quantity_sold - quantity)
        )
        if rowcount == 0:
            raise DomainError(f'Cannot release {quantity} tickets of offer {offer_id}')

    @Logger.io
    async def lock_seat(
        self,
        *,
        event_id: int,
        seat_id: int,
        ticket_tier_id: int,
        expires_at: datetime,
        order_id: UUID,
    ) -> None:
        rowcount = await self._execute_guarded(
            update(EventSeatModel)
            .where(
                EventSeatModel.event_id == event_id,
                EventSeatModel.seat_id == seat_id,
                EventSeatModel.ticket_tier_id == ticket_tier_id,
                EventSeatModel.status == SeatStatus.AVAILABLE.value,
            )
            .values(
                status=SeatStatus.LOCKED.value,
                lock_expires_at=expires_at,
                order_id=order_id,
            )
        )
        if rowcount:
            return

        seat = await self.get_seat(event_id=event_id, seat_id=seat_id)
        if seat is not None and seat.ticket_tier_id != ticket_tier_id:
            raise DomainError(f'Seat {seat_id} is not sold under ticket tier {ticket_tier_id}')
        raise SeatUnavailableError(f'Seat {seat_id} is no longer available.')

    @Logger.io
    async def unlock_seat(
        self, *, event_id: int, seat_id: int, order_id: Optional[UUID] = None
    ) -> None:
        guard = [
            EventSeatModel.event_id == event_id,
            EventSeatModel.seat_id == seat_id,
            EventSeatModel.status == SeatStatus.LOCKED.value,
        ]
        if order_id is not None:
            guard.append(EventSeatModel.order_id == order_id)

        rowcount = await self._execute_guarded(
            update(EventSeatModel)
            .where(*guard)
            .values(status=SeatStatus.AVAILABLE.value, lock_expires_at=None, order_id=None)
        )
        if rowcount:
            return

        seat = await self.get_seat(event_id=event_id, seat_id=seat_id)
        if seat is None:
            raise NotFoundError(f'Seat {seat_id} not found for event {event_id}')
        if seat.status == SeatStatus.AVAILABLE:
            return
        if seat.status == SeatStatus.LOCKED:
            raise SeatUnavailableError(f'Seat {seat_id} is locked by another order.')
        raise SeatUnavailableError(f'Seat {seat_id} is {seat.status} and cannot be unlocked.')

    @Logger.io
    async def mark_seats_sold(self, *, order_id: UUID, seats: list[tuple[int, int]]) -> int:
        if not seats:
            return 0
        return await self._execute_guarded(
            update(EventSeatModel)
            .where(
                or_(
                    *(
                        and_(EventSeatModel.event_id == event_id, EventSeatModel.seat_id == seat_id)
                        for event_id, seat_id in seats
                    )
                ),
                EventSeatModel.status == SeatStatus.LOCKED.value,
                EventSeatModel.order_id == order_id,
            )
            .values(status=SeatStatus.SOLD.value, lock_expires_at=None, order_id=order_id)
        )

    @Logger.io
    async def release_expired_locks(self, *, now: datetime) -> int:
        return await self._execute_guarded(
            update(EventSeatModel)
            .where(
                EventSeatModel.status == SeatStatus.LOCKED.value,
                EventSeatModel.lock_expires_at < now,
                # a pending order's locks go back only through the order expiry path
                ~select(OrderModel.id)
                .where(
                    OrderModel.id == EventSeatModel.order_id,
                    OrderModel.status == OrderStatus.PENDING.value,
                )
                .correlate(EventSeatModel)
                .exists(),
            )
            .values(status=SeatStatus.AVAILABLE.value, lock_expires_at=None, order_id=None)
        )

    async def get_seat(self, *, event_id: int, seat_id: int) -> EventSeat | None:
        result = await self.session.execute(
            select(EventSeatModel)
            .where(EventSeatModel.event_id == event_id, EventSeatModel.seat_id == seat_id)
            .execution_options(populate_existing=True)
        )
        db_seat = result.scalar_one_or_none()
        return event_seat_to_entity(db_seat) if db_seat else None
