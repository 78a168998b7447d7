from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.service.checkout.domain.entity.ticket_entity import Ticket


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_order_id(self, *, order_id: UUID) -> List[Ticket]:
        pass
