from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.entity.user_entity import UserEntity


class GetTicketUseCase:
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
    async def get_by_id(self, *, ticket_id: int, actor: UserEntity) -> TicketEntity:
        """Visible to the holder, the event's organizer and admins."""
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None:
                raise NotFoundError(f'Ticket {ticket_id} not found')
            if ticket.user_id == actor.id or actor.is_admin:
                return ticket

            event = await uow.event_repo.get_by_id(event_id=ticket.event_id)
            if event is None or not actor.can_manage_event(event):
                raise ForbiddenError('Not allowed to view this ticket')
            return ticket
