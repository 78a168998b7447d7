from typing import Any, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Header, Request
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.fail_payment_use_case import FailPaymentUseCase
from src.service.checkout.app.command.finalize_payment_use_case import FinalizePaymentUseCase
from src.service.checkout.driven_adapter.payment_gateway.webhook_signature_verifier import (
    WebhookSignatureVerifier,
)
from src.service.checkout.driving_adapter.http_controller.schema.order_schema import (
    WebhookAckResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)

PAYMENT_SUCCEEDED = 'payment_intent.succeeded'
PAYMENT_FAILED = 'payment_intent.payment_failed'


@inject
def get_webhook_verifier(
    verifier: WebhookSignatureVerifier = Depends(Provide[Container.webhook_verifier]),
) -> WebhookSignatureVerifier:
    return verifier


def _intent_id(event: dict[str, Any]) -> str:
    data_object = (event.get('data') or {}).get('object') or {}
    intent_id = data_object.get('id') if isinstance(data_object, dict) else None
    if not intent_id or not isinstance(intent_id, str):
        raise DomainError('Webhook event carries no payment intent id')
    return intent_id


@router.post('/payment')
async def payment_webhook(
    request: Request,
    payment_signature: Optional[str] = Header(None, alias='Payment-Signature'),
    verifier: WebhookSignatureVerifier = Depends(get_webhook_verifier),
    finalize_use_case: FinalizePaymentUseCase = Depends(FinalizePaymentUseCase.depends),
    fail_use_case: FailPaymentUseCase = Depends(FailPaymentUseCase.depends),
) -> WebhookAckResponse:
    """
    Gateway callback. Duplicate deliveries are acknowledged with 200 so the gateway
    stops retrying; unknown event types are acknowledged and ignored.
    """
    payload = await request.body()
    event = verifier.verify(payload, payment_signature)
    event_type = event.get('type')

    with tracer.start_as_current_span(
        'controller.payment_webhook', attributes={'webhook.type': str(event_type)}
    ):
        if event_type == PAYMENT_SUCCEEDED:
            tickets = await finalize_use_case.finalize(intent_id=_intent_id(event))
            return WebhookAckResponse(handled=tickets is not None)

        if event_type == PAYMENT_FAILED:
            order = await fail_use_case.execute(intent_id=_intent_id(event))
            return WebhookAckResponse(handled=order is not None)

        Logger.base.info(f'📭 [WEBHOOK] Ignoring event type {event_type}')
        return WebhookAckResponse(handled=False)
