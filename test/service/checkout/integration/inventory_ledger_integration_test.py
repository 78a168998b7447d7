"""
Integration tests for InventoryLedgerImpl against sqlite

Every operation is a guarded UPDATE; these tests pin down which row states each
guard accepts.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import (
    DomainError,
    InsufficientInventoryError,
    NotFoundError,
    SeatUnavailableError,
)
from src.service.checkout.domain.enum.seat_status import SeatStatus


NOW = datetime.now(timezone.utc)
EVENT_ID = 1


@pytest.mark.integration
class TestGeneralAdmission:
    @pytest.mark.asyncio
    async def test_reserve_until_sold_out(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_offer: Any
    ) -> None:
        offer_id = await seed_offer(price='20.00', quantity_for_sale=3)

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.reserve_general_admission(offer_id=offer_id, quantity=2)

        with pytest.raises(InsufficientInventoryError):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.reserve_general_admission(
                    offer_id=offer_id, quantity=2
                )

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.reserve_general_admission(offer_id=offer_id, quantity=1)
            offer = await uow.offer_query_repo.get_by_id(offer_id=offer_id)

        assert offer is not None
        assert offer.quantity_sold == 3
        assert offer.quantity_available == 0

    @pytest.mark.asyncio
    async def test_release_cannot_go_below_zero(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_offer: Any
    ) -> None:
        offer_id = await seed_offer(price='20.00', quantity_for_sale=5, quantity_sold=1)

        with pytest.raises(DomainError):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.release_general_admission(
                    offer_id=offer_id, quantity=2
                )

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.release_general_admission(offer_id=offer_id, quantity=1)
            offer = await uow.offer_query_repo.get_by_id(offer_id=offer_id)

        assert offer is not None
        assert offer.quantity_sold == 0

    @pytest.mark.asyncio
    async def test_uncommitted_reservation_is_rolled_back(
        self, uow_factory: UnitOfWorkFactory, seed_offer: Any
    ) -> None:
        offer_id = await seed_offer(price='20.00', quantity_for_sale=5)

        async with uow_factory() as uow:
            await uow.inventory_ledger.reserve_general_admission(offer_id=offer_id, quantity=5)
            # scoped unit of work: no commit

        async with uow_factory() as uow:
            offer = await uow.offer_query_repo.get_by_id(offer_id=offer_id)

        assert offer is not None
        assert offer.quantity_sold == 0


@pytest.mark.integration
class TestSeats:
    @pytest.mark.asyncio
    async def test_lock_then_second_lock_fails(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        await seed_seats(event_id=EVENT_ID, seat_ids=[101])
        holder = uuid7()

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.lock_seat(
                event_id=EVENT_ID,
                seat_id=101,
                ticket_tier_id=1,
                expires_at=NOW + timedelta(minutes=15),
                order_id=holder,
            )

        with pytest.raises(SeatUnavailableError, match='no longer available'):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.lock_seat(
                    event_id=EVENT_ID,
                    seat_id=101,
                    ticket_tier_id=1,
                    expires_at=NOW + timedelta(minutes=15),
                    order_id=uuid7(),
                )

        async with ad_hoc_uow_factory() as uow:
            seat = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=101)

        assert seat is not None
        assert seat.status == SeatStatus.LOCKED
        assert seat.order_id == holder
        assert seat.is_locked_at(NOW)

    @pytest.mark.asyncio
    async def test_unlock_only_by_holder(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        holder = uuid7()
        await seed_seats(
            event_id=EVENT_ID,
            seat_ids=[101],
            status='locked',
            lock_expires_at=NOW + timedelta(minutes=15),
            order_id=holder,
        )

        with pytest.raises(SeatUnavailableError, match='another order'):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.unlock_seat(
                    event_id=EVENT_ID, seat_id=101, order_id=uuid7()
                )

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.unlock_seat(event_id=EVENT_ID, seat_id=101, order_id=holder)
            seat = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=101)

        assert seat is not None
        assert seat.status == SeatStatus.AVAILABLE
        assert seat.order_id is None

    @pytest.mark.asyncio
    async def test_unlock_available_seat_is_a_no_op(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        await seed_seats(event_id=EVENT_ID, seat_ids=[101])

        async with ad_hoc_uow_factory() as uow:
            await uow.inventory_ledger.unlock_seat(event_id=EVENT_ID, seat_id=101)

    @pytest.mark.asyncio
    async def test_unknown_and_sold_seats(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        await seed_seats(event_id=EVENT_ID, seat_ids=[102], status='sold', order_id=uuid7())

        with pytest.raises(NotFoundError):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.unlock_seat(event_id=EVENT_ID, seat_id=999)

        with pytest.raises(SeatUnavailableError, match='sold'):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.unlock_seat(event_id=EVENT_ID, seat_id=102)

        with pytest.raises(SeatUnavailableError):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.lock_seat(
                    event_id=EVENT_ID,
                    seat_id=102,
                    ticket_tier_id=1,
                    expires_at=NOW + timedelta(minutes=15),
                    order_id=uuid7(),
                )

    @pytest.mark.asyncio
    async def test_lock_rejects_seat_of_another_tier(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        await seed_seats(event_id=EVENT_ID, seat_ids=[101], ticket_tier_id=2)

        with pytest.raises(DomainError, match='ticket tier 1'):
            async with ad_hoc_uow_factory() as uow:
                await uow.inventory_ledger.lock_seat(
                    event_id=EVENT_ID,
                    seat_id=101,
                    ticket_tier_id=1,
                    expires_at=NOW + timedelta(minutes=15),
                    order_id=uuid7(),
                )

        async with ad_hoc_uow_factory() as uow:
            seat = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=101)
        assert seat is not None
        assert seat.status == SeatStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_mark_sold_only_for_holder(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        holder = uuid7()
        expires = NOW + timedelta(minutes=15)
        await seed_seats(
            event_id=EVENT_ID,
            seat_ids=[101],
            status='locked',
            lock_expires_at=expires,
            order_id=holder,
        )
        await seed_seats(event_id=EVENT_ID, seat_ids=[102])
        await seed_seats(
            event_id=EVENT_ID,
            seat_ids=[103],
            status='locked',
            lock_expires_at=expires,
            order_id=uuid7(),
        )

        async with ad_hoc_uow_factory() as uow:
            sold = await uow.inventory_ledger.mark_seats_sold(
                order_id=holder,
                seats=[(EVENT_ID, 101), (EVENT_ID, 102), (EVENT_ID, 103)],
            )

        assert sold == 1
        async with ad_hoc_uow_factory() as uow:
            free = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=102)
            taken = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=103)
        assert free is not None and taken is not None
        assert free.status == SeatStatus.AVAILABLE
        assert taken.status == SeatStatus.LOCKED

    @pytest.mark.asyncio
    async def test_release_expired_locks(
        self, ad_hoc_uow_factory: UnitOfWorkFactory, seed_seats: Any
    ) -> None:
        await seed_seats(
            event_id=EVENT_ID,
            seat_ids=[101, 102],
            status='locked',
            lock_expires_at=NOW - timedelta(minutes=1),
            order_id=uuid7(),
        )
        await seed_seats(
            event_id=EVENT_ID,
            seat_ids=[103],
            status='locked',
            lock_expires_at=NOW + timedelta(minutes=10),
            order_id=uuid7(),
        )

        async with ad_hoc_uow_factory() as uow:
            released = await uow.inventory_ledger.release_expired_locks(now=NOW)

        assert released == 2
        async with ad_hoc_uow_factory() as uow:
            still_locked = await uow.inventory_ledger.get_seat(event_id=EVENT_ID, seat_id=103)
        assert still_locked is not None
        assert still_locked.status == SeatStatus.LOCKED
