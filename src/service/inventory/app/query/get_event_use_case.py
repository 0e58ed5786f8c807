from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.complete_ended_events_use_case import (
    complete_event_if_ended,
)
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.value_object.time_window import Clock


class GetEventUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_lock_registry: EventLockRegistry,
        clock: Clock,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock_registry = event_lock_registry
        self.clock = clock

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
    async def get_by_id(self, *, event_id: int) -> EventEntity:
        """Reading an event past its end completes it before it is returned."""
        event = await self._load(event_id)
        if not EventLifecycle.should_complete(event, self.clock()):
            return event

        Logger.base.info(f'🏁 [GET_EVENT] event {event_id} has ended, completing on read')
        completed = await complete_event_if_ended(
            uow_factory=self.uow_factory,
            event_lock_registry=self.event_lock_registry,
            clock=self.clock,
            event_id=event_id,
        )
        return completed or await self._load(event_id)

    async def _load(self, event_id: int) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)
        if event is None:
            Logger.base.warning(f'⚠️ [GET_EVENT] Event {event_id} not found')
            raise NotFoundError(f'Event {event_id} not found')
        return event
