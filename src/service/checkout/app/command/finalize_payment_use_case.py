from datetime import datetime, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import (
    ConflictError,
    NotFoundError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.checkout_metrics import CheckoutMetrics
from src.service.checkout.domain.entity.ticket_entity import Ticket
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus


class FinalizePaymentUseCase:
    """
    Turn a succeeded payment intent into a completed order with issued tickets

    The guarded payment pending -> succeeded update is the idempotency gate: a
    redelivered webhook (or one racing the expiry sweep) matches zero rows and
    the whole call becomes a no-op.
    """

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
    async def finalize(self, *, intent_id: str) -> Optional[List[Ticket]]:
        """
        Returns:
            The issued tickets, or None when the payment was not pending

        Raises:
            SeatUnavailableError: a seat of the order is held by someone else; nothing
                is committed and the payment stays pending
        """
        with self.tracer.start_as_current_span(
            'use_case.finalize_payment', attributes={'payment.intent_id': intent_id}
        ) as span:
            now = datetime.now(timezone.utc)
            async with self.uow_factory() as uow:
                order_id = await uow.payment_command_repo.transition_from_pending_by_reference(
                    external_reference=intent_id, to_status=PaymentStatus.SUCCEEDED
                )
                if order_id is None:
                    await self._record_not_pending(uow, intent_id=intent_id)
                    span.set_attribute('payment.duplicate', True)
                    return None

                span.set_attribute('order.id', str(order_id))

                order = await uow.order_command_repo.get_by_id(order_id=order_id)
                if order is None:
                    raise NotFoundError(f'Order {order_id} not found for intent {intent_id}')
                if not order.is_pending:
                    # every path out of pending fails the payment first
                    raise ConflictError(f'Order {order_id} is no longer pending')
                if order.is_expired(now=now):
                    Logger.base.warning(
                        f'⏰ [FINALIZE] Order {order_id} paid after its reservation window, '
                        'completing before the reaper got to it'
                    )
                order = order.complete(now=now)

                if not await uow.order_command_repo.transition_from_pending(
                    order_id=order_id, to_status=OrderStatus.COMPLETED, now=now
                ):
                    raise ConflictError(f'Order {order_id} is no longer pending')

                seats = [(item.event_id, item.seat_id) for item in order.items if item.is_seat]
                sold = await uow.inventory_ledger.mark_seats_sold(
                    order_id=order_id,
                    seats=seats,  # type: ignore[arg-type]
                )
                if sold != len(seats):
                    self.metrics.record_payment(result='seat_conflict')
                    raise SeatUnavailableError(
                        f'Order {order_id}: only {sold}/{len(seats)} seats are still held '
                        'by this order'
                    )

                tickets = order.issue_tickets(now=now)
                await uow.ticket_command_repo.create_many(tickets=tickets)
                await uow.commit()

            self.metrics.record_payment(result='completed')
            Logger.base.info(
                f'🎟️ [FINALIZE] Order {order_id} completed, issued {len(tickets)} tickets'
            )
            return tickets

    async def _record_not_pending(self, uow: AbstractUnitOfWork, *, intent_id: str) -> None:
        payment = await uow.payment_command_repo.get_by_reference(external_reference=intent_id)
        if payment is not None and payment.status == PaymentStatus.FAILED:
            # the order was cancelled or expired while the customer paid
            Logger.base.error(
                f'💸 [FINALIZE] Intent {intent_id} succeeded but order {payment.order_id} '
                f'was already closed, {payment.amount_charged} {payment.currency} needs a refund'
            )
            self.metrics.record_payment(result='charged_after_expiry')
            return

        Logger.base.warning(
            f'⚠️ [FINALIZE] No pending payment for intent {intent_id}, '
            'already processed or unknown'
        )
        self.metrics.record_payment(result='duplicate')
