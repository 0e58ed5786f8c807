from typing import Callable, List, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.retry import retry_on_transient_conflict
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    CustomBaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.inventory_errors import (
    AlreadyCheckedInError,
    InvalidTransitionError,
)
from src.service.inventory.domain.ticket_lifecycle import TicketLifecycle
from src.service.inventory.domain.value_object.bulk_item_outcome import BulkItemOutcome
from src.service.inventory.domain.value_object.time_window import Clock


class CheckInTicketUseCase:
    """
    active -> checked_in while the event has not ended.

    Check-in does not touch capacity, so it needs no event lock: the
    conditional status write lets exactly one of two racing check-ins win.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        clock: Clock,
        settings: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.clock = clock
        self.max_attempts = settings.CAPACITY_RESERVE_MAX_RETRIES
        self.retry_backoff_seconds = settings.CAPACITY_RETRY_BACKOFF_SECONDS
        self.bulk_max_concurrency = settings.BULK_MAX_CONCURRENCY
        self.bulk_max_items = settings.BULK_MAX_ITEMS

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, clock=clock, settings=settings)

    @Logger.io
    async def execute(self, *, ticket_id: int, actor: UserEntity) -> TicketEntity:
        return await retry_on_transient_conflict(
            lambda: self._check_in_once(ticket_id=ticket_id, actor=actor),
            max_attempts=self.max_attempts,
            backoff_seconds=self.retry_backoff_seconds,
            label='CHECK_IN',
        )

    @Logger.io
    async def execute_bulk(
        self, *, event_id: int, ticket_ids: List[int], actor: UserEntity
    ) -> List[BulkItemOutcome[TicketEntity]]:
        if not ticket_ids:
            raise ValidationError('ticket_ids cannot be empty')
        if len(ticket_ids) > self.bulk_max_items:
            raise ValidationError(f'At most {self.bulk_max_items} items per bulk request')

        outcomes: List[Optional[BulkItemOutcome[TicketEntity]]] = [None] * len(ticket_ids)
        limiter = anyio.CapacityLimiter(self.bulk_max_concurrency)

        async def check_in_item(index: int, ticket_id: int) -> None:
            async with limiter:
                try:
                    ticket = await retry_on_transient_conflict(
                        lambda: self._check_in_once(
                            ticket_id=ticket_id, actor=actor, expected_event_id=event_id
                        ),
                        max_attempts=self.max_attempts,
                        backoff_seconds=self.retry_backoff_seconds,
                        label='CHECK_IN',
                    )
                    outcomes[index] = BulkItemOutcome.success(index=index, result=ticket)
                except CustomBaseError as e:
                    outcomes[index] = BulkItemOutcome.failure(index=index, error=e)

        async with anyio.create_task_group() as tg:
            for index, ticket_id in enumerate(ticket_ids):
                tg.start_soon(check_in_item, index, ticket_id)

        results = [outcome for outcome in outcomes if outcome is not None]
        succeeded = sum(1 for outcome in results if outcome.succeeded)
        Logger.base.info(
            f'📦 [BULK_CHECK_IN] event={event_id} succeeded={succeeded} '
            f'failed={len(results) - succeeded}'
        )
        return results

    async def _check_in_once(
        self, *, ticket_id: int, actor: UserEntity, expected_event_id: Optional[int] = None
    ) -> TicketEntity:
        async with self.uow_factory() as uow:
            now = self.clock()
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None or (
                expected_event_id is not None and ticket.event_id != expected_event_id
            ):
                raise NotFoundError(f'Ticket {ticket_id} not found')

            event = await uow.event_repo.get_by_id(event_id=ticket.event_id)
            if event is None:
                raise NotFoundError(f'Event {ticket.event_id} not found')
            if not actor.can_manage_event(event):
                raise ForbiddenError('Only the event organizer or an admin can check in tickets')

            checked_in = TicketLifecycle.check_in(ticket, event=event, now=now)
            if not await uow.ticket_repo.update_status(
                ticket=checked_in, from_status=TicketStatus.ACTIVE
            ):
                current = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                if current is not None and current.status == TicketStatus.CHECKED_IN:
                    raise AlreadyCheckedInError(f'Ticket {ticket_id} is already checked in')
                raise InvalidTransitionError(f'Ticket {ticket_id} changed status concurrently')

            await uow.commit()

        Logger.base.info(f'✅ [CHECK_IN] ticket={ticket_id} event={ticket.event_id}')
        return checked_in
