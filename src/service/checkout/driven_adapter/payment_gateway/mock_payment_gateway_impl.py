import secrets

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_intent import PaymentIntent
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway


class MockPaymentGatewayImpl(IPaymentGateway):
    """Local intents for development; confirm them by posting a signed webhook."""

    @Logger.io
    async def create_payment_intent(self, *, amount: int, currency: str) -> PaymentIntent:
        intent_id = f'pi_mock_{secrets.token_hex(12)}'
        Logger.base.info(f'💳 [MOCK-GATEWAY] Created {intent_id} for {amount} {currency}')
        return PaymentIntent(
            intent_id=intent_id, client_secret=f'{intent_id}_secret_{secrets.token_hex(8)}'
        )
