"""SQLAlchemy models; importing this package registers every table on Base.metadata"""

from src.service.checkout.driven_adapter.model.event_seat_model import EventSeatModel
from src.service.checkout.driven_adapter.model.offer_model import OfferModel
from src.service.checkout.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.checkout.driven_adapter.model.payment_model import PaymentModel
from src.service.checkout.driven_adapter.model.ticket_model import TicketModel

__all__ = [
    'EventSeatModel',
    'OfferModel',
    'OrderItemModel',
    'OrderModel',
    'PaymentModel',
    'TicketModel',
]
