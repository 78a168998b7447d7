"""
Test Configuration and Fixtures

- Environment is set before any application module reads settings
- Each test gets its own sqlite file database (tables via Base.metadata.create_all)
- Seed helpers for offers and event seats
- Unit tests (test/**/unit/) use mocks only and never touch these database fixtures
"""

# =============================================================================
# Environment setup MUST happen before any application import
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['LOCK_REAPER_ENABLED'] = 'false'
    os.environ['PAYMENT_GATEWAY_MODE'] = 'mock'
    os.environ.setdefault('SECRET_KEY', 'test_secret_key_change_in_production')
    os.environ.setdefault('PAYMENT_WEBHOOK_SECRET', 'whsec_test_secret')


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import datetime  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Optional  # noqa: E402
from unittest.mock import Mock  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.core_setting import Settings  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import (  # noqa: E402
    SqlAlchemyUnitOfWork,
    UnitOfWorkFactory,
)
from src.platform.metrics.checkout_metrics import CheckoutMetrics  # noqa: E402
from src.service.checkout.app.command.cancel_order_use_case import CancelOrderUseCase  # noqa: E402
from src.service.checkout.app.command.create_order_use_case import CreateOrderUseCase  # noqa: E402
from src.service.checkout.app.command.fail_payment_use_case import FailPaymentUseCase  # noqa: E402
from src.service.checkout.app.command.finalize_payment_use_case import (  # noqa: E402
    FinalizePaymentUseCase,
)
from src.service.checkout.app.command.release_expired_reservations_use_case import (  # noqa: E402
    ReleaseExpiredReservationsUseCase,
)
from src.service.checkout.app.query.get_order_use_case import GetOrderUseCase  # noqa: E402
import src.service.checkout.driven_adapter.model  # noqa: E402, F401
from src.service.checkout.driven_adapter.model.event_seat_model import EventSeatModel  # noqa: E402
from src.service.checkout.driven_adapter.model.offer_model import OfferModel  # noqa: E402
from src.service.checkout.driven_adapter.payment_gateway import (  # noqa: E402
    mock_payment_gateway_impl,
)


SeedOffer = Callable[..., Awaitable[int]]
SeedSeats = Callable[..., Awaitable[None]]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        SERVICE_FEE_PER_TICKET=Decimal('2.50'),
        RESERVATION_WINDOW_MINUTES=15,
        CHECKOUT_MAX_ITEMS=20,
        CHECKOUT_MAX_TICKETS=10,
        CURRENCY='usd',
    )


@pytest.fixture
def metrics() -> Mock:
    return Mock(spec=CheckoutMetrics)


# =============================================================================
# Database
# =============================================================================
@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(f'sqlite+aiosqlite:///{tmp_path / "checkout.db"}')
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork.scoped(database.session_factory)


@pytest.fixture
def ad_hoc_uow_factory(database: Database) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork.ad_hoc(database.session_factory)


@pytest.fixture
def seed_offer(database: Database) -> SeedOffer:
    async def _seed(
        *,
        price: str,
        quantity_for_sale: int,
        event_id: int = 1,
        ticket_tier_id: int = 1,
        name: str = 'General Admission',
        quantity_sold: int = 0,
    ) -> int:
        async with database.session() as session:
            offer = OfferModel(
                event_id=event_id,
                ticket_tier_id=ticket_tier_id,
                name=name,
                price=Decimal(price),
                quantity_for_sale=quantity_for_sale,
                quantity_sold=quantity_sold,
            )
            session.add(offer)
            await session.commit()
            return offer.id

    return _seed


@pytest.fixture
def seed_seats(database: Database) -> SeedSeats:
    async def _seed(
        *,
        event_id: int,
        seat_ids: list[int],
        ticket_tier_id: int = 1,
        status: str = 'available',
        lock_expires_at: Optional[datetime] = None,
        order_id: Optional[UUID] = None,
    ) -> None:
        async with database.session() as session:
            session.add_all(
                [
                    EventSeatModel(
                        event_id=event_id,
                        seat_id=seat_id,
                        ticket_tier_id=ticket_tier_id,
                        status=status,
                        lock_expires_at=lock_expires_at,
                        order_id=order_id,
                    )
                    for seat_id in seat_ids
                ]
            )
            await session.commit()

    return _seed


# =============================================================================
# Use cases wired against the test database
# =============================================================================
@pytest.fixture
def payment_gateway() -> mock_payment_gateway_impl.MockPaymentGatewayImpl:
    return mock_payment_gateway_impl.MockPaymentGatewayImpl()


@pytest.fixture
def create_order_use_case(
    uow_factory: UnitOfWorkFactory,
    payment_gateway: mock_payment_gateway_impl.MockPaymentGatewayImpl,
    test_settings: Settings,
    metrics: Mock,
) -> CreateOrderUseCase:
    return CreateOrderUseCase(
        uow_factory=uow_factory,
        payment_gateway=payment_gateway,
        settings=test_settings,
        metrics=metrics,
    )


@pytest.fixture
def finalize_payment_use_case(
    uow_factory: UnitOfWorkFactory, metrics: Mock
) -> FinalizePaymentUseCase:
    return FinalizePaymentUseCase(uow_factory=uow_factory, metrics=metrics)


@pytest.fixture
def fail_payment_use_case(uow_factory: UnitOfWorkFactory, metrics: Mock) -> FailPaymentUseCase:
    return FailPaymentUseCase(uow_factory=uow_factory, metrics=metrics)


@pytest.fixture
def cancel_order_use_case(uow_factory: UnitOfWorkFactory) -> CancelOrderUseCase:
    return CancelOrderUseCase(uow_factory=uow_factory)


@pytest.fixture
def get_order_use_case(uow_factory: UnitOfWorkFactory) -> GetOrderUseCase:
    return GetOrderUseCase(uow_factory=uow_factory)


@pytest.fixture
def release_expired_use_case(
    uow_factory: UnitOfWorkFactory, ad_hoc_uow_factory: UnitOfWorkFactory, metrics: Mock
) -> ReleaseExpiredReservationsUseCase:
    return ReleaseExpiredReservationsUseCase(
        uow_factory=uow_factory,
        ad_hoc_uow_factory=ad_hoc_uow_factory,
        metrics=metrics,
        batch_size=50,
    )


@pytest.fixture
def intent_id_of(ad_hoc_uow_factory: UnitOfWorkFactory) -> Callable[[UUID], Awaitable[str]]:
    """Gateway intent id recorded on the order's payment"""

    async def _intent_id_of(order_id: UUID) -> str:
        async with ad_hoc_uow_factory() as uow:
            payment = await uow.payment_command_repo.get_by_order_id(order_id=order_id)
        assert payment is not None
        return payment.external_reference

    return _intent_id_of
