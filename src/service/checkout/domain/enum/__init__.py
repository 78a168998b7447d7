"""Checkout Domain Enums"""

from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus
from src.service.checkout.domain.enum.seat_status import SeatStatus
from src.service.checkout.domain.enum.ticket_status import TicketStatus

__all__ = ['OrderStatus', 'PaymentStatus', 'SeatStatus', 'TicketStatus']
