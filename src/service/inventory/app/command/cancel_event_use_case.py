from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.retry import retry_on_transient_conflict
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.dto.event_cancellation_result import EventCancellationResult
from src.service.inventory.app.dto.reservation_token import ReservationToken
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.inventory_errors import InvalidTransitionError
from src.service.inventory.domain.ticket_lifecycle import TicketLifecycle
from src.service.inventory.domain.value_object.time_window import Clock


tracer = trace.get_tracer(__name__)


class CancelEventUseCase:
    """
    draft|published|sold_out -> cancelled, with the ticket cascade.

    The whole cascade is one Unit of Work under the event lock and the event
    row lock, so no purchase can slip in between the status flip and the
    ticket updates:
    1. event -> cancelled (conditional on the status just read)
    2. every active/checked_in ticket -> cancelled or refunded (one UPDATE)
    3. their capacity units go back through the ledger in one release
    Either all of it commits or none of it does.
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
    async def execute(
        self, *, event_id: int, actor: UserEntity, issue_refunds: bool = False
    ) -> EventCancellationResult:
        with tracer.start_as_current_span(
            'use_case.cancel_event',
            attributes={'event_id': event_id, 'issue_refunds': issue_refunds},
        ):
            return await retry_on_transient_conflict(
                lambda: self._cancel_once(
                    event_id=event_id, actor=actor, issue_refunds=issue_refunds
                ),
                max_attempts=self.max_attempts,
                backoff_seconds=self.retry_backoff_seconds,
                label='CANCEL_EVENT',
            )

    async def _cancel_once(
        self, *, event_id: int, actor: UserEntity, issue_refunds: bool
    ) -> EventCancellationResult:
        async with self.event_lock_registry.hold(event_id):
            async with self.uow_factory() as uow:
                now = self.clock()
                event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                if event is None:
                    raise NotFoundError(f'Event {event_id} not found')
                if not actor.can_manage_event(event):
                    raise ForbiddenError('Only the event organizer or an admin can cancel it')

                cancelled = EventLifecycle.cancel(event)
                if not await uow.event_repo.update_status(
                    event_id=event_id, from_status=event.status, to_status=cancelled.status
                ):
                    raise InvalidTransitionError(f'Event {event_id} changed status concurrently')

                affected = 0
                released = 0
                if event.status != EventStatus.DRAFT:
                    target = TicketLifecycle.cascade_target(issue_refunds=issue_refunds)
                    affected = await uow.ticket_repo.bulk_update_status(
                        event_id=event_id,
                        from_statuses=TicketLifecycle.cascade_sources(target),
                        to_status=target,
                        now=now,
                    )
                    released = await uow.ticket_repo.bulk_mark_capacity_released(
                        event_id=event_id, statuses=[target]
                    )
                    if released:
                        await uow.capacity_ledger.release(
                            ReservationToken.for_committed_units(event_id=event_id, count=released)
                        )

                final = await uow.event_repo.get_by_id(event_id=event_id)
                await uow.commit()

        assert final is not None
        metrics.record_event_transition(from_status=event.status.value, to_status='cancelled')
        metrics.record_cancellation_cascade(affected_tickets=affected)
        metrics.record_capacity_release(reason='event_cancel', count=released)
        metrics.update_remaining_capacity(event_id=event_id, remaining=final.remaining_capacity)
        Logger.base.info(
            f'🛑 [CANCEL_EVENT] event={event_id} from={event.status.value} '
            f'affected_tickets={affected} refunded={issue_refunds}'
        )
        return EventCancellationResult(
            event=final, affected_tickets=affected, refunded=issue_refunds
        )
