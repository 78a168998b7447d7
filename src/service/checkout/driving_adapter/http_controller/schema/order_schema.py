from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.checkout.app.dto.checkout_result import OrderDetail
from src.service.checkout.domain.entity.order_entity import Order, OrderItem
from src.service.checkout.domain.entity.payment_entity import Payment
from src.service.checkout.domain.entity.ticket_entity import Ticket
from src.service.checkout.domain.value_object.cart_item import CartItem


class CartItemRequest(BaseModel):
    offer_id: int
    quantity: int = Field(default=1, ge=1)
    seat_id: Optional[int] = None  # seat lines always carry quantity 1

    def to_cart_item(self) -> CartItem:
        return CartItem(offer_id=self.offer_id, quantity=self.quantity, seat_id=self.seat_id)


class OrderCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'items': [
                    {'offer_id': 1, 'quantity': 2},
                    {'offer_id': 2, 'seat_id': 101},
                ]
            }
        },
    }

    items: List[CartItemRequest]


class OrderItemResponse(BaseModel):
    offer_id: int
    event_id: int
    ticket_tier_id: int
    seat_id: Optional[int] = None
    quantity: int
    unit_price: Decimal

    @classmethod
    def from_entity(cls, item: OrderItem) -> 'OrderItemResponse':
        return cls(
            offer_id=item.offer_id,
            event_id=item.event_id,
            ticket_tier_id=item.ticket_tier_id,
            seat_id=item.seat_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )


class OrderResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'user_id': 2,
                'status': 'pending',
                'subtotal': '90.00',
                'service_fee': '7.50',
                'total_amount': '97.50',
                'currency': 'usd',
                'expires_at': '2025-01-10T10:45:00Z',
            }
        },
    }

    id: UUID
    user_id: int
    status: str
    subtotal: Decimal
    service_fee: Decimal
    total_amount: Decimal
    currency: str
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    expires_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order: Order) -> 'OrderResponse':
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=order.status.value,
            subtotal=order.subtotal,
            service_fee=order.service_fee,
            total_amount=order.total_amount,
            currency=order.currency,
            items=[OrderItemResponse.from_entity(item) for item in order.items],
            created_at=order.created_at,
            expires_at=order.expires_at,
            completed_at=order.completed_at,
        )


class CheckoutResponse(BaseModel):
    order: OrderResponse
    client_secret: str


class PaymentResponse(BaseModel):
    status: str
    amount_charged: Decimal
    currency: str

    @classmethod
    def from_entity(cls, payment: Payment) -> 'PaymentResponse':
        return cls(
            status=payment.status.value,
            amount_charged=payment.amount_charged,
            currency=payment.currency,
        )


class TicketResponse(BaseModel):
    id: UUID
    event_id: int
    ticket_tier_id: int
    seat_id: Optional[int] = None
    price_paid: Decimal
    redemption_code: str
    status: str

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            event_id=ticket.event_id,
            ticket_tier_id=ticket.ticket_tier_id,
            seat_id=ticket.seat_id,
            price_paid=ticket.price_paid,
            redemption_code=ticket.redemption_code,
            status=ticket.status.value,
        )


class OrderDetailResponse(BaseModel):
    order: OrderResponse
    payment: Optional[PaymentResponse] = None
    tickets: List[TicketResponse] = []

    @classmethod
    def from_detail(cls, detail: OrderDetail) -> 'OrderDetailResponse':
        return cls(
            order=OrderResponse.from_entity(detail.order),
            payment=PaymentResponse.from_entity(detail.payment) if detail.payment else None,
            tickets=[TicketResponse.from_entity(ticket) for ticket in detail.tickets],
        )


class WebhookAckResponse(BaseModel):
    received: bool = True
    handled: bool = False
