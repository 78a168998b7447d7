"""
Checkout API

    granian --interface asgi src.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.checkout.driving_adapter.background.reaper_factory import build_lock_reaper


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Checkout] Starting up...')

    tracing = TracingConfig(service_name='checkout-service')
    tracing.setup()

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Checkout] Dependency injection wired')

    settings = container.config_service()
    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info(f'🗄️  [Checkout] Database engine ready ({database.engine_label})')

    async with anyio.create_task_group() as tg:
        reaper = None
        if settings.LOCK_REAPER_ENABLED:
            reaper = build_lock_reaper(container)
            await reaper.start(task_group=tg)

        Logger.base.info('✅ [Checkout] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Checkout] Shutting down...')
        if reaper is not None:
            reaper.stop()
        tg.cancel_scope.cancel()

    gateway = container.payment_gateway()
    await gateway.aclose()
    await database.dispose()
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Checkout] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
