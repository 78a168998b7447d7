from datetime import datetime, timezone
import time
from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PaymentGatewayError,
    SeatUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.checkout_metrics import CheckoutMetrics
from src.service.checkout.app.dto.checkout_result import CheckoutResult
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.domain.entity.order_entity import Order, OrderItem
from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.value_object.cart_item import CartItem
from src.service.checkout.domain.value_object.principal import Principal


class CreateOrderUseCase:
    """
    Checkout: reserve every cart line, create the pending order, open a payment intent

    Flow (one scoped unit of work):
    1. Validate the cart (nothing touched yet)
    2. Pre-generate the UUID7 order id so seat locks can record their holder
    3. Per line: seat -> lock_seat (same ticket tier as the offer) until order.expires_at,
       otherwise reserve GA quantity
    4. Price the order (subtotal + per-ticket service fee) and insert it with its items
    5. Create the gateway payment intent and insert the pending payment
    6. Commit

    Any failure in 3-6 rolls the whole transaction back, so a partially reserved
    cart is never visible to anyone else.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        payment_gateway: IPaymentGateway,
        settings: Settings,
        metrics: CheckoutMetrics,
    ) -> None:
        self.uow_factory = uow_factory
        self.payment_gateway = payment_gateway
        self.settings = settings
        self.metrics = metrics
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        settings: Settings = Depends(Provide[Container.config_service]),
        metrics: CheckoutMetrics = Depends(Provide[Container.metrics]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            payment_gateway=payment_gateway,
            settings=settings,
            metrics=metrics,
        )

    @Logger.io
    async def create_order(self, *, principal: Principal, items: List[CartItem]) -> CheckoutResult:
        started = time.perf_counter()
        try:
            Order.validate_cart(
                items,
                max_items=self.settings.CHECKOUT_MAX_ITEMS,
                max_tickets=self.settings.CHECKOUT_MAX_TICKETS,
            )
            result = await self._checkout(principal=principal, items=items)
        except ConflictError as e:
            kind = 'seat' if isinstance(e, SeatUnavailableError) else 'general_admission'
            self.metrics.record_inventory_conflict(kind=kind)
            self.metrics.record_order(result='conflict')
            raise
        except (DomainError, NotFoundError):
            self.metrics.record_order(result='invalid')
            raise
        except PaymentGatewayError:
            self.metrics.record_order(result='gateway_error')
            raise
        except Exception:
            self.metrics.record_order(result='error')
            raise

        self.metrics.record_order(result='created', duration=time.perf_counter() - started)
        return result

    async def _checkout(self, *, principal: Principal, items: List[CartItem]) -> CheckoutResult:
        order_id = uuid7()
        now = datetime.now(timezone.utc)
        expires_at = Order.expiry_from(
            now, window_minutes=self.settings.RESERVATION_WINDOW_MINUTES
        )

        with self.tracer.start_as_current_span(
            'use_case.create_order',
            attributes={
                'order.id': str(order_id),
                'user.id': principal.id,
                'order.item_count': len(items),
            },
        ):
            async with self.uow_factory() as uow:
                order_items = [
                    await self._reserve_line(
                        uow, order_id=order_id, item=item, expires_at=expires_at
                    )
                    for item in items
                ]

                order = Order.create(
                    id=order_id,
                    user_id=principal.id,
                    items=order_items,
                    service_fee_per_ticket=self.settings.SERVICE_FEE_PER_TICKET,
                    currency=self.settings.CURRENCY,
                    expires_at=expires_at,
                    now=now,
                )
                await uow.order_command_repo.create(order=order)

                intent = await self.payment_gateway.create_payment_intent(
                    amount=order.amount_in_minor_units, currency=order.currency
                )
                await uow.payment_command_repo.create(
                    payment=Payment.create_pending(
                        id=uuid7(),
                        order_id=order.id,
                        amount_charged=order.total_amount,
                        currency=order.currency,
                        external_reference=intent.intent_id,
                    )
                )

                await uow.commit()

            Logger.base.info(
                f'🧾 [CHECKOUT] Order {order.id} pending for user {principal.id}: '
                f'{order.ticket_count} tickets, total {order.total_amount} {order.currency}, '
                f'intent {intent.intent_id}'
            )
            return CheckoutResult(order=order, client_secret=intent.client_secret)

    async def _reserve_line(
        self,
        uow: AbstractUnitOfWork,
        *,
        order_id: UUID,
        item: CartItem,
        expires_at: datetime,
    ) -> OrderItem:
        offer = await uow.offer_query_repo.get_by_id(offer_id=item.offer_id)
        if offer is None:
            raise NotFoundError(f'Offer {item.offer_id} not found')

        if item.is_seat:
            await uow.inventory_ledger.lock_seat(
                event_id=offer.event_id,
                seat_id=item.seat_id,  # type: ignore[arg-type]
                ticket_tier_id=offer.ticket_tier_id,
                expires_at=expires_at,
                order_id=order_id,
            )
        else:
            await uow.inventory_ledger.reserve_general_admission(
                offer_id=offer.id, quantity=item.quantity
            )

        return OrderItem(
            id=uuid7(),
            order_id=order_id,
            offer_id=offer.id,
            event_id=offer.event_id,
            ticket_tier_id=offer.ticket_tier_id,
            seat_id=item.seat_id,
            quantity=item.quantity,
            unit_price=offer.price,
        )
