from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.checkout.domain.entity.ticket_entity import Ticket
from src.service.checkout.driven_adapter.model.entity_mapper import ticket_to_entity
from src.service.checkout.driven_adapter.model.ticket_model import TicketModel


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io(truncate_content=True)
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        self.session.add_all(
            [
                TicketModel(
                    id=ticket.id,
                    order_id=ticket.order_id,
                    user_id=ticket.user_id,
                    event_id=ticket.event_id,
                    ticket_tier_id=ticket.ticket_tier_id,
                    seat_id=ticket.seat_id,
                    price_paid=ticket.price_paid,
                    redemption_code=ticket.redemption_code,
                    status=ticket.status.value,
                    created_at=ticket.created_at,
                )
                for ticket in tickets
            ]
        )
        await self.session.flush()
        return tickets

    @Logger.io
    async def list_by_order_id(self, *, order_id: UUID) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.order_id == order_id)
            .order_by(TicketModel.id)
        )
        return [ticket_to_entity(db_ticket) for db_ticket in result.scalars().all()]
