from typing import Optional

import httpx
import orjson

from src.platform.exception.exceptions import PaymentGatewayError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_intent import PaymentIntent
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway


class StripePaymentGatewayImpl(IPaymentGateway):
    """
    Stripe REST client (form-encoded POST /v1/payment_intents)

    Any transport error or non-2xx answer becomes PaymentGatewayError so the
    checkout transaction rolls back and the caller can retry.
    """

    def __init__(
        self,
        *,
        base_url: str,
        secret_key: str,
        timeout_seconds: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={'Authorization': f'Bearer {secret_key}'},
            transport=transport,
        )

    @Logger.io
    async def create_payment_intent(self, *, amount: int, currency: str) -> PaymentIntent:
        try:
            response = await self._client.post(
                '/v1/payment_intents',
                data={
                    'amount': str(amount),
                    'currency': currency,
                    'automatic_payment_methods[enabled]': 'true',
                },
            )
        except httpx.HTTPError as e:
            raise PaymentGatewayError(f'Payment gateway unreachable: {type(e).__name__}') from e

        if response.is_error:
            raise PaymentGatewayError(
                f'Payment gateway rejected the request with status {response.status_code}'
            )

        try:
            payload = orjson.loads(response.content)
            return PaymentIntent(intent_id=payload['id'], client_secret=payload['client_secret'])
        except (orjson.JSONDecodeError, KeyError, TypeError) as e:
            raise PaymentGatewayError('Payment gateway returned a malformed payment intent') from e

    async def aclose(self) -> None:
        await self._client.aclose()
