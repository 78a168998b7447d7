from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.driven_adapter.model.entity_mapper import (
    order_to_entity,
    order_to_model,
)
from src.service.checkout.driven_adapter.model.order_model import OrderModel


class OrderCommandRepoImpl(IOrderCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, order: Order) -> Order:
        self.session.add(order_to_model(order))
        await self.session.flush()
        return order

    @Logger.io
    async def get_by_id(self, *, order_id: UUID) -> Order | None:
        # guarded updates bypass the identity map, so always reload
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        db_order = result.scalar_one_or_none()
        return order_to_entity(db_order) if db_order else None

    @Logger.io
    async def transition_from_pending(
        self, *, order_id: UUID, to_status: OrderStatus, now: datetime
    ) -> bool:
        values: dict[str, object] = {'status': to_status.value, 'updated_at': now}
        if to_status == OrderStatus.COMPLETED:
            values['completed_at'] = now

        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == OrderStatus.PENDING.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_expired_pending(self, *, now: datetime, limit: int) -> List[UUID]:
        result = await self.session.execute(
            select(OrderModel.id)
            .where(
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.expires_at < now,
            )
            .order_by(OrderModel.expires_at)
            .limit(limit)
        )
        return list(result.scalars().all())
