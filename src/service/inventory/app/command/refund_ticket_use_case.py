from typing import Callable, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.retry import retry_on_transient_conflict
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.event_capacity_sync import release_ticket_capacity
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.inventory_errors import InvalidTransitionError
from src.service.inventory.domain.ticket_lifecycle import TicketLifecycle
from src.service.inventory.domain.value_object.time_window import Clock


class RefundTicketUseCase:
    """Administrative active|checked_in -> refunded; returns capacity if still held."""

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
    async def execute(self, *, ticket_id: int) -> TicketEntity:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError(f'Ticket {ticket_id} not found')

        return await retry_on_transient_conflict(
            lambda: self._refund_once(ticket_id=ticket_id, event_id=ticket.event_id),
            max_attempts=self.max_attempts,
            backoff_seconds=self.retry_backoff_seconds,
            label='REFUND_TICKET',
        )

    async def _refund_once(self, *, ticket_id: int, event_id: int) -> TicketEntity:
        async with self.event_lock_registry.hold(event_id):
            async with self.uow_factory() as uow:
                now = self.clock()
                await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id, for_update=True)
                if ticket is None:
                    raise NotFoundError(f'Ticket {ticket_id} not found')

                refunded = TicketLifecycle.refund(ticket, now=now)
                if not await uow.ticket_repo.update_status(
                    ticket=refunded, from_status=ticket.status
                ):
                    raise InvalidTransitionError(f'Ticket {ticket_id} changed status concurrently')

                released = await release_ticket_capacity(
                    uow, ticket=refunded, reason='ticket_refund'
                )
                await uow.commit()

        if released is not None:
            metrics.update_remaining_capacity(
                event_id=event_id, remaining=released.remaining_capacity
            )
        Logger.base.info(f'💸 [REFUND_TICKET] ticket={ticket_id} event={event_id}')
        return attrs.evolve(refunded, capacity_released=True)
