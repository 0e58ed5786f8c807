from typing import Any, Callable, Dict, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.create_event_use_case import validate_draft_placement
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle


EDITABLE_FIELDS = frozenset(
    {'name', 'description', 'venue_id', 'start', 'end', 'base_price', 'max_attendees'}
)


class UpdateEventUseCase:
    """Partial update of a draft event. Published events are changed only by transitions."""

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
    async def update(
        self, *, event_id: int, actor: UserEntity, changes: Dict[str, Any]
    ) -> EventEntity:
        if unknown := set(changes) - EDITABLE_FIELDS:
            raise ValidationError(f'Fields cannot be updated: {", ".join(sorted(unknown))}')

        async with self.event_lock_registry.hold(event_id):
            async with self.uow_factory() as uow:
                event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                if event is None:
                    raise NotFoundError(f'Event {event_id} not found')
                if not actor.can_manage_event(event):
                    raise ForbiddenError('Only the event organizer or an admin can edit it')
                EventLifecycle.ensure_editable(event)

                try:
                    edited = attrs.evolve(event, **changes)
                except ValueError as e:
                    raise ValidationError(str(e)) from e

                await validate_draft_placement(uow, event=edited)
                updated = await uow.event_repo.update_details(event=edited)
                await uow.commit()

        Logger.base.info(f'✏️ [UPDATE_EVENT] event={event_id} fields={sorted(changes)}')
        return updated
