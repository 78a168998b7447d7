from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import SeatUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.order_entity import Order


async def release_order_inventory(uow: AbstractUnitOfWork, *, order: Order) -> None:
    """
    Give back everything a pending order holds: GA units and its own seat locks.

    A seat lock that was already swept (or re-taken by another order) is skipped;
    only a lock still recorded against this order is released.
    """
    for item in order.items:
        if item.seat_id is None:
            await uow.inventory_ledger.release_general_admission(
                offer_id=item.offer_id, quantity=item.quantity
            )
            continue

        try:
            await uow.inventory_ledger.unlock_seat(
                event_id=item.event_id, seat_id=item.seat_id, order_id=order.id
            )
        except SeatUnavailableError as e:
            Logger.base.info(f'🔓 [RELEASE] Order {order.id} no longer holds seat: {e.message}')
