from datetime import datetime, timezone
from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.release_order_inventory import release_order_inventory
from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus
from src.service.checkout.domain.value_object.principal import Principal


class CancelOrderUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, principal: Principal, order_id: UUID) -> Order:
        """
        Cancel a pending order and release its inventory

        Raises:
            NotFoundError: unknown order
            ForbiddenError: caller neither owns the order nor is admin
            DomainError: order is not pending
            ConflictError: payment settled while cancelling
        """
        with self.tracer.start_as_current_span(
            'use_case.cancel_order', attributes={'order.id': str(order_id)}
        ):
            now = datetime.now(timezone.utc)
            async with self.uow_factory() as uow:
                order = await uow.order_command_repo.get_by_id(order_id=order_id)
                if order is None:
                    raise NotFoundError('Order not found')
                if not principal.can_access(owner_id=order.user_id):
                    raise ForbiddenError('Only the buyer can cancel this order')

                cancelled = order.cancel(now=now)

                # same gate as the finalizer: whoever moves the payment first wins
                if not await uow.payment_command_repo.transition_from_pending_by_order(
                    order_id=order_id, to_status=PaymentStatus.FAILED
                ):
                    raise ConflictError('Payment for this order is already settled')
                if not await uow.order_command_repo.transition_from_pending(
                    order_id=order_id, to_status=OrderStatus.CANCELLED, now=now
                ):
                    raise ConflictError('Order is no longer pending')

                await release_order_inventory(uow, order=order)
                await uow.commit()

            Logger.base.info(f'🚫 [CANCEL] Order {order_id} cancelled by user {principal.id}')
            return cancelled
