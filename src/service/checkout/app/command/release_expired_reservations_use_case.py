from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from opentelemetry import trace

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.checkout_metrics import CheckoutMetrics
from src.service.checkout.app.command.release_order_inventory import release_order_inventory
from src.service.checkout.app.dto.checkout_result import ReapResult
from src.service.checkout.domain.enum.order_status import OrderStatus
from src.service.checkout.domain.enum.payment_status import PaymentStatus


class ReleaseExpiredReservationsUseCase:
    """
    One reaper pass

    1. Order expiry: every pending order past expires_at is cancelled in its own
       transaction; its payment is failed first so a late webhook cannot complete it,
       then GA units and its seat locks go back to the pool.
    2. Lock release: a seat lock past lock_expires_at returns to available unless its
       order is still pending; those wait for step 1 of a later pass.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        ad_hoc_uow_factory: UnitOfWorkFactory,
        metrics: CheckoutMetrics,
        batch_size: int = 100,
    ) -> None:
        self.uow_factory = uow_factory
        self.ad_hoc_uow_factory = ad_hoc_uow_factory
        self.metrics = metrics
        self.batch_size = batch_size
        self.tracer = trace.get_tracer(__name__)

    async def execute(self, *, now: Optional[datetime] = None) -> ReapResult:
        now = now or datetime.now(timezone.utc)
        with self.tracer.start_as_current_span('use_case.release_expired_reservations') as span:
            expired_orders = await self.expire_pending_orders(now=now)
            released_locks = await self.release_expired_locks(now=now)
            span.set_attribute('reaper.expired_orders', expired_orders)
            span.set_attribute('reaper.released_locks', released_locks)

        if expired_orders or released_locks:
            Logger.base.info(
                f'🧹 [REAPER] Expired {expired_orders} orders, '
                f'released {released_locks} seat locks'
            )
        return ReapResult(expired_orders=expired_orders, released_locks=released_locks)

    async def expire_pending_orders(self, *, now: datetime) -> int:
        async with self.ad_hoc_uow_factory() as uow:
            order_ids = await uow.order_command_repo.list_expired_pending(
                now=now, limit=self.batch_size
            )

        expired = 0
        for order_id in order_ids:
            try:
                if await self._expire_order(order_id=order_id, now=now):
                    expired += 1
            except Exception as e:
                # one broken order must not block the rest of the batch
                Logger.base.exception(f'❌ [REAPER] Failed to expire order {order_id}: {e}')
        self.metrics.record_reaper_release(kind='expired_order', count=expired)
        return expired

    @Logger.io
    async def release_expired_locks(self, *, now: datetime) -> int:
        async with self.ad_hoc_uow_factory() as uow:
            released = await uow.inventory_ledger.release_expired_locks(now=now)
        self.metrics.record_reaper_release(kind='seat_lock', count=released)
        return released

    async def _expire_order(self, *, order_id: UUID, now: datetime) -> bool:
        async with self.uow_factory() as uow:
            if not await uow.payment_command_repo.transition_from_pending_by_order(
                order_id=order_id, to_status=PaymentStatus.FAILED
            ):
                # finalizer or a failed-payment webhook got there first
                return False
            if not await uow.order_command_repo.transition_from_pending(
                order_id=order_id, to_status=OrderStatus.CANCELLED, now=now
            ):
                return False

            order = await uow.order_command_repo.get_by_id(order_id=order_id)
            if order is not None:
                await release_order_inventory(uow, order=order)
            await uow.commit()

        Logger.base.info(f'⏰ [REAPER] Order {order_id} expired and cancelled')
        return True
