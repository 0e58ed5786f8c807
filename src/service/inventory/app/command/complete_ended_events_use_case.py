from typing import Callable, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.value_object.time_window import Clock


async def complete_event_if_ended(
    *,
    uow_factory: Callable[[], AbstractUnitOfWork],
    event_lock_registry: EventLockRegistry,
    clock: Clock,
    event_id: int,
) -> Optional[EventEntity]:
    """
    published|sold_out -> completed once `end` has passed.

    Returns the completed event, or None when the event is missing or not due.
    Shared by the periodic sweep and the lazy check on read.
    """
    async with event_lock_registry.hold(event_id):
        async with uow_factory() as uow:
            now = clock()
            event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
            if event is None or not EventLifecycle.should_complete(event, now):
                return None

            completed = EventLifecycle.complete(event, now=now)
            if not await uow.event_repo.update_status(
                event_id=event_id, from_status=event.status, to_status=completed.status
            ):
                return None
            await uow.commit()

    metrics.record_event_transition(from_status=event.status.value, to_status='completed')
    Logger.base.info(f'🏁 [COMPLETE_EVENT] event={event_id} from={event.status.value}')
    return completed


class CompleteEndedEventsUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_lock_registry: EventLockRegistry,
        clock: Clock,
        batch_size: int = 100,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock_registry = event_lock_registry
        self.clock = clock
        self.batch_size = batch_size

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_lock_registry: EventLockRegistry = Depends(Provide[Container.event_lock_registry]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_lock_registry=event_lock_registry, clock=clock)

    @Logger.io
    async def execute(self) -> int:
        """One sweep; returns how many events were completed."""
        async with self.uow_factory() as uow:
            event_ids = await uow.event_repo.list_ended_event_ids(
                now=self.clock(), limit=self.batch_size
            )

        completed = 0
        for event_id in event_ids:
            if await complete_event_if_ended(
                uow_factory=self.uow_factory,
                event_lock_registry=self.event_lock_registry,
                clock=self.clock,
                event_id=event_id,
            ):
                completed += 1

        if completed:
            Logger.base.info(f'🏁 [COMPLETION_SWEEP] completed {completed} events')
        return completed

    async def run_forever(self, *, interval_seconds: float) -> None:
        """Lifespan background loop; a failed sweep is logged and retried next interval."""
        Logger.base.info(f'🔄 [COMPLETION_SWEEP] started, interval={interval_seconds}s')
        while True:
            try:
                await self.execute()
            except Exception as e:
                Logger.base.exception(f'❌ [COMPLETION_SWEEP] sweep failed: {e}')
            await anyio.sleep(interval_seconds)
