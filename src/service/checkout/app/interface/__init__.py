"""Application layer interfaces (Ports)"""

from src.service.checkout.app.interface.i_inventory_ledger import IInventoryLedger
from src.service.checkout.app.interface.i_offer_query_repo import IOfferQueryRepo
from src.service.checkout.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.checkout.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.app.interface.i_ticket_command_repo import ITicketCommandRepo

__all__ = [
    'IInventoryLedger',
    'IOfferQueryRepo',
    'IOrderCommandRepo',
    'IPaymentCommandRepo',
    'IPaymentGateway',
    'ITicketCommandRepo',
]
