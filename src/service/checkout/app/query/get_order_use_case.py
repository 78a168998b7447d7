from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.checkout_result import OrderDetail
from src.service.checkout.domain.value_object.principal import Principal


class GetOrderUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, principal: Principal, order_id: UUID) -> OrderDetail:
        async with self.uow_factory() as uow:
            order = await uow.order_command_repo.get_by_id(order_id=order_id)
            if order is None:
                raise NotFoundError('Order not found')
            if not principal.can_access(owner_id=order.user_id):
                raise ForbiddenError('Access denied')

            payment = await uow.payment_command_repo.get_by_order_id(order_id=order_id)
            tickets = await uow.ticket_command_repo.list_by_order_id(order_id=order_id)

        return OrderDetail(order=order, payment=payment, tickets=tickets)
