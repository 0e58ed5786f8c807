from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.publish_event_use_case import venue_lock_key
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.enum.venue_status import VenueStatus
from src.service.inventory.domain.value_object.time_window import Clock


class DeleteVenueUseCase:
    """
    A venue with upcoming events cannot be deleted.

    Venues that past events still reference are closed instead of removed so
    ticket history stays intact. Returns True when the row was removed.
    """

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
    async def delete(self, *, venue_id: int, actor: UserEntity) -> bool:
        if actor.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
            raise ForbiddenError('Only organizers or admins can manage venues')

        async with self.event_lock_registry.hold(venue_lock_key(venue_id)):
            async with self.uow_factory() as uow:
                venue = await uow.venue_repo.get_by_id(venue_id=venue_id)
                if venue is None:
                    raise NotFoundError(f'Venue {venue_id} not found')

                upcoming = await uow.venue_repo.count_upcoming_events(
                    venue_id=venue_id, now=self.clock()
                )
                if upcoming:
                    raise ConflictError(
                        f'Venue {venue_id} still has {upcoming} upcoming events'
                    )

                removed = await uow.venue_repo.count_events(venue_id=venue_id) == 0
                if removed:
                    await uow.venue_repo.delete(venue_id=venue_id)
                else:
                    await uow.venue_repo.update_status(
                        venue_id=venue_id, status=VenueStatus.CLOSED
                    )
                await uow.commit()

        Logger.base.info(
            f'🗑️ [DELETE_VENUE] venue={venue_id} {"removed" if removed else "closed"}'
        )
        return removed
