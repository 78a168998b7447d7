"""
Standalone lock reaper

    python -m src.service.checkout.driving_adapter.background.start_lock_reaper

Runs the same sweep as the API process; useful when the API runs with
LOCK_REAPER_ENABLED=false behind several replicas.
"""

import anyio

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.checkout.driving_adapter.background.reaper_factory import build_lock_reaper


async def main() -> None:
    tracing = TracingConfig(service_name='checkout-lock-reaper')
    tracing.setup()

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)

    reaper = build_lock_reaper(container)
    Logger.base.info('🚀 [REAPER] Standalone reaper starting')
    try:
        await reaper.run()
    finally:
        with anyio.CancelScope(shield=True):
            await database.dispose()
        tracing.shutdown()
        Logger.base.info('👋 [REAPER] Shutdown complete')


if __name__ == '__main__':
    anyio.run(main)
