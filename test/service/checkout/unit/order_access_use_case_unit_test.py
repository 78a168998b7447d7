"""Unit tests for CancelOrderUseCase and GetOrderUseCase (ownership and state rules)"""

from typing import Any

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.service.checkout.app.command.cancel_order_use_case import CancelOrderUseCase
from src.service.checkout.app.query.get_order_use_case import GetOrderUseCase
from src.service.checkout.domain.entity.order_entity import Order
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus
from src.service.checkout.domain.value_object.principal import Principal, UserRole


OWNER = Principal(id=42)
STRANGER = Principal(id=7)
ADMIN = Principal(id=1, role=UserRole.ADMIN)


@pytest.fixture
def cancel_use_case(fake_uow: Any) -> CancelOrderUseCase:
    return CancelOrderUseCase(uow_factory=lambda: fake_uow)


@pytest.fixture
def get_use_case(fake_uow: Any) -> GetOrderUseCase:
    return GetOrderUseCase(uow_factory=lambda: fake_uow)


@pytest.mark.unit
class TestCancelOrderUseCase:
    @pytest.mark.asyncio
    async def test_owner_cancels_and_inventory_is_released(
        self, cancel_use_case: CancelOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        # Arrange
        fake_uow.order_command_repo.get_by_id.return_value = pending_order
        fake_uow.payment_command_repo.transition_from_pending_by_order.return_value = True
        fake_uow.order_command_repo.transition_from_pending.return_value = True

        # Act
        cancelled = await cancel_use_case.execute(principal=OWNER, order_id=pending_order.id)

        # Assert
        assert cancelled.status == OrderStatus.CANCELLED
        fake_uow.payment_command_repo.transition_from_pending_by_order.assert_awaited_once_with(
            order_id=pending_order.id, to_status=PaymentStatus.FAILED
        )
        fake_uow.inventory_ledger.release_general_admission.assert_awaited_once_with(
            offer_id=1, quantity=2
        )
        fake_uow.inventory_ledger.unlock_seat.assert_awaited_once_with(
            event_id=7, seat_id=101, order_id=pending_order.id
        )
        assert fake_uow.committed

    @pytest.mark.asyncio
    async def test_admin_may_cancel_any_order(
        self, cancel_use_case: CancelOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = pending_order
        fake_uow.payment_command_repo.transition_from_pending_by_order.return_value = True
        fake_uow.order_command_repo.transition_from_pending.return_value = True

        cancelled = await cancel_use_case.execute(principal=ADMIN, order_id=pending_order.id)

        assert cancelled.status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_unknown_order(self, cancel_use_case: CancelOrderUseCase, fake_uow: Any) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await cancel_use_case.execute(principal=OWNER, order_id=uuid7())

    @pytest.mark.asyncio
    async def test_other_buyer_is_forbidden(
        self, cancel_use_case: CancelOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = pending_order

        with pytest.raises(ForbiddenError):
            await cancel_use_case.execute(principal=STRANGER, order_id=pending_order.id)

        fake_uow.payment_command_repo.transition_from_pending_by_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_completed_order_cannot_be_cancelled(
        self, cancel_use_case: CancelOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = pending_order.complete(
            now=pending_order.expires_at
        )

        with pytest.raises(DomainError):
            await cancel_use_case.execute(principal=OWNER, order_id=pending_order.id)

        assert not fake_uow.committed

    @pytest.mark.asyncio
    async def test_payment_settled_while_cancelling(
        self, cancel_use_case: CancelOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        # Arrange - the webhook moved the payment first
        fake_uow.order_command_repo.get_by_id.return_value = pending_order
        fake_uow.payment_command_repo.transition_from_pending_by_order.return_value = False

        with pytest.raises(ConflictError):
            await cancel_use_case.execute(principal=OWNER, order_id=pending_order.id)

        fake_uow.inventory_ledger.release_general_admission.assert_not_awaited()
        assert not fake_uow.committed


@pytest.mark.unit
class TestGetOrderUseCase:
    @pytest.mark.asyncio
    async def test_owner_sees_order_with_payment_and_tickets(
        self, get_use_case: GetOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = pending_order
        fake_uow.payment_command_repo.get_by_order_id.return_value = None
        fake_uow.ticket_command_repo.list_by_order_id.return_value = []

        detail = await get_use_case.execute(principal=OWNER, order_id=pending_order.id)

        assert detail.order is pending_order
        assert detail.tickets == []

    @pytest.mark.asyncio
    async def test_stranger_is_forbidden(
        self, get_use_case: GetOrderUseCase, fake_uow: Any, pending_order: Order
    ) -> None:
        fake_uow.order_command_repo.get_by_id.return_value = pending_order

        with pytest.raises(ForbiddenError):
            await get_use_case.execute(principal=STRANGER, order_id=pending_order.id)
