"""
Inventory Ledger Interface

Every mutation is a single guarded UPDATE; zero affected rows is the failure signal.
Callers own the transaction through the unit of work.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.service.checkout.domain.entity.event_seat_entity import EventSeat


class IInventoryLedger(ABC):
    @abstractmethod
    async def reserve_general_admission(self, *, offer_id: int, quantity: int) -> None:
        """
        quantity_sold += quantity, only while enough units remain unsold

        Raises:
            InsufficientInventoryError: fewer than `quantity` units remain
        """
        pass

    @abstractmethod
    async def release_general_admission(self, *, offer_id: int, quantity: int) -> None:
        """
        quantity_sold -= quantity, only while quantity_sold >= quantity

        Raises:
            DomainError: releasing more than was reserved
        """
        pass

    @abstractmethod
    async def lock_seat(
        self,
        *,
        event_id: int,
        seat_id: int,
        ticket_tier_id: int,
        expires_at: datetime,
        order_id: UUID,
    ) -> None:
        """
        available -> locked until `expires_at`, held by `order_id`

        Only a seat of `ticket_tier_id` can be locked.

        Raises:
            DomainError: the seat belongs to another ticket tier
            SeatUnavailableError: seat is not available (or does not exist)
        """
        pass

    @abstractmethod
    async def unlock_seat(
        self, *, event_id: int, seat_id: int, order_id: Optional[UUID] = None
    ) -> None:
        """
        locked -> available; a no-op when the seat is already available

        When `order_id` is given only a lock held by that order is released.

        Raises:
            NotFoundError: unknown seat
            SeatUnavailableError: seat is sold / unavailable / held by another order
        """
        pass

    @abstractmethod
    async def mark_seats_sold(self, *, order_id: UUID, seats: list[tuple[int, int]]) -> int:
        """
        locked -> sold for the (event_id, seat_id) pairs held by `order_id`

        Returns:
            Rows affected; fewer than len(seats) means a seat is no longer held by the order
        """
        pass

    @abstractmethod
    async def release_expired_locks(self, *, now: datetime) -> int:
        """
        Bulk locked -> available where lock_expires_at < now; returns rows affected

        Locks held by a still-pending order are left alone.
        """
        pass

    @abstractmethod
    async def get_seat(self, *, event_id: int, seat_id: int) -> EventSeat | None:
        pass
