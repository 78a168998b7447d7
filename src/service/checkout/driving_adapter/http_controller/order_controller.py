from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.cancel_order_use_case import CancelOrderUseCase
from src.service.checkout.app.command.create_order_use_case import CreateOrderUseCase
from src.service.checkout.app.query.get_order_use_case import GetOrderUseCase
from src.service.checkout.domain.value_object.principal import Principal
from src.service.checkout.driving_adapter.http_controller.auth.current_principal import (
    get_current_principal,
)
from src.service.checkout.driving_adapter.http_controller.schema.order_schema import (
    CheckoutResponse,
    OrderCreateRequest,
    OrderDetailResponse,
    OrderResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_order(
    request: OrderCreateRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: CreateOrderUseCase = Depends(CreateOrderUseCase.depends),
) -> CheckoutResponse:
    with tracer.start_as_current_span('controller.create_order') as span:
        span.set_attribute('user.id', principal.id)
        span.set_attribute('order.item_count', len(request.items))

        result = await use_case.create_order(
            principal=principal,
            items=[item.to_cart_item() for item in request.items],
        )

        span.set_attribute('order.id', str(result.order.id))
        return CheckoutResponse(
            order=OrderResponse.from_entity(result.order),
            client_secret=result.client_secret,
        )


@router.get('/{order_id}')
@Logger.io
async def get_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderDetailResponse:
    detail = await use_case.execute(principal=principal, order_id=order_id)
    return OrderDetailResponse.from_detail(detail)


@router.patch('/{order_id}/cancel')
@Logger.io
async def cancel_order(
    order_id: UUID,
    principal: Principal = Depends(get_current_principal),
    use_case: CancelOrderUseCase = Depends(CancelOrderUseCase.depends),
) -> OrderResponse:
    order = await use_case.execute(principal=principal, order_id=order_id)
    return OrderResponse.from_entity(order)
