from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.publish_event_use_case import venue_lock_key
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.enum.venue_status import VenueStatus


class UpdateVenueStatusUseCase:
    """
    Opens or closes a venue.

    Closing keeps already published events in place; it only stops new
    publishes at the venue.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_lock_registry: EventLockRegistry,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock_registry = event_lock_registry

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_lock_registry: EventLockRegistry = Depends(Provide[Container.event_lock_registry]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_lock_registry=event_lock_registry)

    @Logger.io
    async def update_status(
        self, *, venue_id: int, status: VenueStatus, actor: UserEntity
    ) -> VenueEntity:
        if actor.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
            raise ForbiddenError('Only organizers or admins can manage venues')

        async with self.event_lock_registry.hold(venue_lock_key(venue_id)):
            async with self.uow_factory() as uow:
                venue = await uow.venue_repo.get_by_id(venue_id=venue_id)
                if venue is None:
                    raise NotFoundError(f'Venue {venue_id} not found')
                if venue.status == status:
                    return venue

                updated = await uow.venue_repo.update_status(venue_id=venue_id, status=status)
                await uow.commit()

        Logger.base.info(f'🏟️ [VENUE_STATUS] venue={venue_id} {venue.status.value} -> {status.value}')
        return updated  # type: ignore[return-value]
