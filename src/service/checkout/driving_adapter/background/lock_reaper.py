from typing import Optional

import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.release_expired_reservations_use_case import (
    ReleaseExpiredReservationsUseCase,
)


class LockReaper:
    """
    Periodic driver for ReleaseExpiredReservationsUseCase

    Usage:
        async with anyio.create_task_group() as tg:
            await reaper.start(task_group=tg)
            ...
            tg.cancel_scope.cancel()
    """

    def __init__(
        self, *, use_case: ReleaseExpiredReservationsUseCase, interval_seconds: float
    ) -> None:
        self.use_case = use_case
        self.interval_seconds = interval_seconds
        self._cancel_scope: Optional[anyio.CancelScope] = None

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self.run)
        Logger.base.info(f'🧹 [REAPER] Started, sweeping every {self.interval_seconds}s')

    async def run(self) -> None:
        with anyio.CancelScope() as scope:
            self._cancel_scope = scope
            while True:
                await self.run_once()
                await anyio.sleep(self.interval_seconds)

    async def run_once(self) -> None:
        try:
            await self.use_case.execute()
        except Exception as e:
            # next pass retries
            Logger.base.exception(f'❌ [REAPER] Sweep failed: {e}')

    def stop(self) -> None:
        if self._cancel_scope is not None:
            self._cancel_scope.cancel()
            Logger.base.info('🛑 [REAPER] Stopped')
