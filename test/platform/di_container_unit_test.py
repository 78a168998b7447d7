from dependency_injector import providers
import pytest

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.checkout.driven_adapter.payment_gateway.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.checkout.driven_adapter.payment_gateway.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)


def _container(**overrides: object) -> Container:
    settings = Settings(**overrides)  # type: ignore[arg-type]
    container = Container()
    container.config_service.override(providers.Object(settings))
    return container


@pytest.mark.unit
class TestContainer:
    def test_mock_gateway_by_default(self) -> None:
        container = _container(PAYMENT_GATEWAY_MODE='mock')

        assert isinstance(container.payment_gateway(), MockPaymentGatewayImpl)

    @pytest.mark.asyncio
    async def test_stripe_gateway_when_configured(self) -> None:
        container = _container(PAYMENT_GATEWAY_MODE='stripe')

        gateway = container.payment_gateway()

        assert isinstance(gateway, StripePaymentGatewayImpl)
        await gateway.aclose()

    def test_units_of_work_are_fresh_per_call(self) -> None:
        container = _container(DATABASE_URL='sqlite+aiosqlite:///:memory:')

        scoped = container.unit_of_work()
        ad_hoc = container.ad_hoc_unit_of_work()

        assert isinstance(scoped, SqlAlchemyUnitOfWork)
        assert scoped is not container.unit_of_work()
        assert not scoped.auto_commit
        assert ad_hoc.auto_commit
