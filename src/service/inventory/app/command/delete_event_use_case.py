from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle


class DeleteEventUseCase:
    """Only draft or cancelled events that no ticket references can be deleted."""

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
    async def delete(self, *, event_id: int, actor: UserEntity) -> None:
        async with self.event_lock_registry.hold(event_id):
            async with self.uow_factory() as uow:
                event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                if event is None:
                    raise NotFoundError(f'Event {event_id} not found')
                if not actor.can_manage_event(event):
                    raise ForbiddenError('Only the event organizer or an admin can delete it')

                ticket_count = await uow.ticket_repo.count_by_event(event_id=event_id)
                EventLifecycle.ensure_deletable(event, ticket_count=ticket_count)

                await uow.event_repo.delete(event_id=event_id)
                await uow.commit()

        Logger.base.info(f'🗑️ [DELETE_EVENT] event={event_id}')
