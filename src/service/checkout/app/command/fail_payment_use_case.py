from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.checkout_metrics import CheckoutMetrics
from src.service.checkout.app.command.release_order_inventory import release_order_inventory
from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus


class FailPaymentUseCase:
    """Gateway reported a failed payment: fail the order and release what it held."""

    def __init__(self, *, uow_factory: UnitOfWorkFactory, metrics: CheckoutMetrics) -> None:
        self.uow_factory = uow_factory
        self.metrics = metrics
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        metrics: CheckoutMetrics = Depends(Provide[Container.metrics]),
    ) -> Self:
        return cls(uow_factory=uow_factory, metrics=metrics)

    @Logger.io
    async def execute(self, *, intent_id: str) -> Optional[Order]:
        with self.tracer.start_as_current_span(
            'use_case.fail_payment', attributes={'payment.intent_id': intent_id}
        ):
            now = datetime.now(timezone.utc)
            async with self.uow_factory() as uow:
                order_id = await uow.payment_command_repo.transition_from_pending_by_reference(
                    external_reference=intent_id, to_status=PaymentStatus.FAILED
                )
                if order_id is None:
                    Logger.base.warning(
                        f'⚠️ [FAIL-PAYMENT] No pending payment for intent {intent_id}, ignoring'
                    )
                    self.metrics.record_payment(result='duplicate')
                    return None

                order = await uow.order_command_repo.get_by_id(order_id=order_id)
                if order is None:
                    raise NotFoundError(f'Order {order_id} not found for intent {intent_id}')
                if not await uow.order_command_repo.transition_from_pending(
                    order_id=order_id, to_status=OrderStatus.FAILED, now=now
                ):
                    raise ConflictError(f'Order {order_id} is no longer pending')

                await release_order_inventory(uow, order=order)
                await uow.commit()

            self.metrics.record_payment(result='failed')
            Logger.base.info(f'💥 [FAIL-PAYMENT] Order {order_id} failed, inventory released')
            return order.fail(now=now)
