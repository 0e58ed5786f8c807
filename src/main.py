"""
Production FastAPI Application

HTTP API plus the periodic completion sweep running in the lifespan task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.inventory.app.command.complete_ended_events_use_case import (
    CompleteEndedEventsUseCase,
)


SERVICE_NAME = 'event-inventory'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Inventory Service] Starting up...')

    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Inventory Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Inventory Service] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    if settings.AUTO_CREATE_TABLES or database.is_sqlite:
        await database.create_all()
    Logger.base.info('🗄️  [Inventory Service] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        interval = settings.COMPLETION_SWEEP_INTERVAL_SECONDS
        if interval > 0:
            sweeper = CompleteEndedEventsUseCase(
                uow_factory=container.unit_of_work,
                event_lock_registry=container.event_lock_registry(),
                clock=container.clock(),
            )
            tg.start_soon(lambda: sweeper.run_forever(interval_seconds=interval))

        Logger.base.info('✅ [Inventory Service] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Inventory Service] Shutting down...')
        tg.cancel_scope.cancel()

    await database.dispose()
    Logger.base.info('🗄️  [Inventory Service] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Inventory Service] Shutdown complete')


app = create_app(lifespan=lifespan, service_name=SERVICE_NAME)


@app.get('/')
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
