from contextlib import AsyncExitStack
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.retry import retry_on_transient_conflict
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    ConcurrencyConflictError,
    ForbiddenError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.inventory_errors import InvalidTransitionError
from src.service.inventory.domain.value_object.time_window import Clock


def venue_lock_key(venue_id: int) -> tuple[str, int]:
    return ('venue', venue_id)


class PublishEventUseCase:
    """
    draft -> published.

    Publishes at the same venue are serialized (venue lock, then event lock)
    so two overlapping drafts cannot both pass the scheduling guard.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_lock_registry: EventLockRegistry,
        clock: Clock,
        settings: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock_registry = event_lock_registry
        self.clock = clock
        self.max_attempts = settings.CAPACITY_RESERVE_MAX_RETRIES
        self.retry_backoff_seconds = settings.CAPACITY_RETRY_BACKOFF_SECONDS

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_lock_registry: EventLockRegistry = Depends(Provide[Container.event_lock_registry]),
        clock: Clock = Depends(Provide[Container.clock]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            event_lock_registry=event_lock_registry,
            clock=clock,
            settings=settings,
        )

    @Logger.io
    async def execute(self, *, event_id: int, actor: UserEntity) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        if not actor.can_manage_event(event):
            raise ForbiddenError('Only the event organizer or an admin can publish it')

        return await retry_on_transient_conflict(
            lambda: self._publish_once(event_id=event_id, venue_id=event.venue_id),
            max_attempts=self.max_attempts,
            backoff_seconds=self.retry_backoff_seconds,
            label='PUBLISH_EVENT',
        )

    async def _publish_once(self, *, event_id: int, venue_id: int | None) -> EventEntity:
        async with AsyncExitStack() as locks:
            if venue_id is not None:
                await locks.enter_async_context(
                    self.event_lock_registry.hold(venue_lock_key(venue_id))
                )
            await locks.enter_async_context(self.event_lock_registry.hold(event_id))

            async with self.uow_factory() as uow:
                now = self.clock()
                event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                if event is None:
                    raise NotFoundError(f'Event {event_id} not found')
                if event.venue_id != venue_id:
                    raise ConcurrencyConflictError(
                        f'Event {event_id} changed venue while publishing, retry the request'
                    )

                venue = (
                    await uow.venue_repo.get_by_id(venue_id=event.venue_id)
                    if event.venue_id is not None
                    else None
                )

                has_conflict = False
                if venue is not None and event.status == EventStatus.DRAFT and event.window:
                    has_conflict = await uow.venue_scheduling_guard.has_conflict(
                        venue_id=venue.id,  # type: ignore[arg-type]
                        start=event.window.start,
                        end=event.window.end,
                        exclude_event_id=event.id,
                    )

                published = EventLifecycle.publish(
                    event, venue=venue, has_conflict=has_conflict, now=now
                )
                if not await uow.event_repo.update_status(
                    event_id=event_id, from_status=event.status, to_status=published.status
                ):
                    raise InvalidTransitionError(f'Event {event_id} changed status concurrently')

                await uow.commit()

        metrics.record_event_transition(from_status='draft', to_status='published')
        Logger.base.info(f'📣 [PUBLISH_EVENT] event={event_id} venue={venue_id}')
        return published
