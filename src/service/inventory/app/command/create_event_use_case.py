from datetime import datetime
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.inventory_errors import SchedulingConflictError


async def validate_draft_placement(uow: AbstractUnitOfWork, *, event: EventEntity) -> None:
    """Early checks for a draft's venue and window; publish re-checks all of them."""
    if event.start is not None and event.end is not None and event.end <= event.start:
        raise ValidationError('Event end must be after its start')
    if event.max_attendees is not None and event.max_attendees <= 0:
        raise ValidationError('max_attendees must be positive')
    if event.base_price is not None and event.base_price < 0:
        raise ValidationError('base_price cannot be negative')

    if event.venue_id is None:
        return
    venue = await uow.venue_repo.get_by_id(venue_id=event.venue_id)
    if venue is None:
        raise NotFoundError(f'Venue {event.venue_id} not found')
    if event.max_attendees is not None and event.max_attendees > venue.capacity:
        raise ValidationError(
            f'max_attendees {event.max_attendees} exceeds venue capacity {venue.capacity}'
        )
    if event.window and await uow.venue_scheduling_guard.has_conflict(
        venue_id=event.venue_id,
        start=event.window.start,
        end=event.window.end,
        exclude_event_id=event.id,
    ):
        raise SchedulingConflictError(f'Window overlaps another event at venue {event.venue_id}')


class CreateEventUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def create(
        self,
        *,
        actor: UserEntity,
        name: str,
        description: str = '',
        venue_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        base_price: Optional[int] = None,
        max_attendees: Optional[int] = None,
        organizer_id: Optional[int] = None,
    ) -> EventEntity:
        if actor.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
            raise ForbiddenError('Only organizers or admins can create events')
        if organizer_id is not None and organizer_id != actor.id and not actor.is_admin:
            raise ForbiddenError('Only admins can create events for another organizer')

        try:
            event = EventEntity(
                name=name,
                description=description,
                organizer_id=organizer_id or actor.id,  # type: ignore[arg-type]
                venue_id=venue_id,
                start=start,
                end=end,
                base_price=base_price,
                max_attendees=max_attendees,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

        async with self.uow_factory() as uow:
            if organizer_id is not None and organizer_id != actor.id:
                organizer = await uow.user_repo.get_by_id(user_id=organizer_id)
                if organizer is None:
                    raise NotFoundError(f'User {organizer_id} not found')
                if organizer.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
                    raise ValidationError(f'User {organizer_id} is not an organizer')

            await validate_draft_placement(uow, event=event)
            created = await uow.event_repo.create(event=event)
            await uow.commit()

        Logger.base.info(f'📝 [CREATE_EVENT] event={created.id} organizer={created.organizer_id}')
        return created
