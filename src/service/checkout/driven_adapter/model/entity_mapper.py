"""Model <-> entity conversion shared by the checkout repositories"""

from datetime import datetime, timezone
from typing import Optional

from src.service.checkout.domain.entity.event_seat_entity import EventSeat
from src.service.checkout.domain.entity.offer_entity import Offer
from src.service.checkout.domain.entity.order_entity import Order, OrderItem
from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.entity.ticket_entity import Ticket
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus
from src.service.checkout.domain.enum.seat_status import SeatStatus
from src.service.checkout.domain.enum.ticket_status import TicketStatus
from src.service.checkout.driven_adapter.model.event_seat_model import EventSeatModel
from src.service.checkout.driven_adapter.model.offer_model import OfferModel
from src.service.checkout.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.checkout.driven_adapter.model.payment_model import PaymentModel
from src.service.checkout.driven_adapter.model.ticket_model import TicketModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands back naive datetimes; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def order_item_to_entity(db_item: OrderItemModel) -> OrderItem:
    return OrderItem(
        id=db_item.id,
        order_id=db_item.order_id,
        offer_id=db_item.offer_id,
        event_id=db_item.event_id,
        ticket_tier_id=db_item.ticket_tier_id,
        seat_id=db_item.seat_id,
        quantity=db_item.quantity,
        unit_price=db_item.unit_price,
    )


def order_to_entity(db_order: OrderModel) -> Order:
    return Order(
        id=db_order.id,
        user_id=db_order.user_id,
        status=OrderStatus(db_order.status),
        subtotal=db_order.subtotal,
        service_fee=db_order.service_fee,
        total_amount=db_order.total_amount,
        currency=db_order.currency,
        expires_at=as_utc(db_order.expires_at),  # type: ignore[arg-type]
        items=[order_item_to_entity(item) for item in db_order.items],
        created_at=as_utc(db_order.created_at),
        updated_at=as_utc(db_order.updated_at),
        completed_at=as_utc(db_order.completed_at),
    )


def order_to_model(order: Order) -> OrderModel:
    return OrderModel(
        id=order.id,
        user_id=order.user_id,
        status=order.status.value,
        subtotal=order.subtotal,
        service_fee=order.service_fee,
        total_amount=order.total_amount,
        currency=order.currency,
        expires_at=order.expires_at,
        created_at=order.created_at,
        updated_at=order.updated_at,
        completed_at=order.completed_at,
        items=[
            OrderItemModel(
                id=item.id,
                order_id=order.id,
                position=position,
                offer_id=item.offer_id,
                event_id=item.event_id,
                ticket_tier_id=item.ticket_tier_id,
                seat_id=item.seat_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for position, item in enumerate(order.items)
        ],
    )


def payment_to_entity(db_payment: PaymentModel) -> Payment:
    return Payment(
        id=db_payment.id,
        order_id=db_payment.order_id,
        status=PaymentStatus(db_payment.status),
        amount_charged=db_payment.amount_charged,
        currency=db_payment.currency,
        external_reference=db_payment.external_reference,
        created_at=as_utc(db_payment.created_at),
        updated_at=as_utc(db_payment.updated_at),
    )


def ticket_to_entity(db_ticket: TicketModel) -> Ticket:
    return Ticket(
        id=db_ticket.id,
        order_id=db_ticket.order_id,
        user_id=db_ticket.user_id,
        event_id=db_ticket.event_id,
        ticket_tier_id=db_ticket.ticket_tier_id,
        seat_id=db_ticket.seat_id,
        price_paid=db_ticket.price_paid,
        redemption_code=db_ticket.redemption_code,
        status=TicketStatus(db_ticket.status),
        created_at=as_utc(db_ticket.created_at),
    )


def offer_to_entity(db_offer: OfferModel) -> Offer:
    return Offer(
        id=db_offer.id,
        event_id=db_offer.event_id,
        ticket_tier_id=db_offer.ticket_tier_id,
        name=db_offer.name,
        price=db_offer.price,
        quantity_for_sale=db_offer.quantity_for_sale,
        quantity_sold=db_offer.quantity_sold,
    )


def event_seat_to_entity(db_seat: EventSeatModel) -> EventSeat:
    return EventSeat(
        event_id=db_seat.event_id,
        seat_id=db_seat.seat_id,
        ticket_tier_id=db_seat.ticket_tier_id,
        status=SeatStatus(db_seat.status),
        lock_expires_at=as_utc(db_seat.lock_expires_at),
        order_id=db_seat.order_id,
    )
