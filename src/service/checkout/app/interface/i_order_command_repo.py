from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from uuid import UUID

from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.enum.order_status import OrderStatus


class IOrderCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, order: Order) -> Order:
        """Insert the order row and its items"""
        pass

    @abstractmethod
    async def get_by_id(self, *, order_id: UUID) -> Order | None:
        """Order with its items loaded"""
        pass

    @abstractmethod
    async def transition_from_pending(
        self, *, order_id: UUID, to_status: OrderStatus, now: datetime
    ) -> bool:
        """
        Guarded pending -> `to_status`; sets completed_at when completing

        Returns:
            False when the order was no longer pending (zero rows)
        """
        pass

    @abstractmethod
    async def list_expired_pending(self, *, now: datetime, limit: int) -> List[UUID]:
        """Ids of pending orders whose expires_at < now, oldest first"""
        pass
