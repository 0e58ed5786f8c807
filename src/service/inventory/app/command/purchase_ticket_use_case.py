import time
from typing import Callable, List, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

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
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.event_capacity_sync import sync_event_capacity_status
from src.service.inventory.app.dto.reservation_token import ReservationToken
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.value_object.bulk_item_outcome import BulkItemOutcome
from src.service.inventory.domain.value_object.time_window import Clock


tracer = trace.get_tracer(__name__)


class PurchaseTicketUseCase:
    """
    Ticket Issuance Coordinator

    One purchase = one Unit of Work under the event lock:
    1. Load the event FOR UPDATE and check it is on sale
    2. Validate the price against base_price (unless overridden)
    3. Reserve one unit through the capacity ledger
    4. Insert the active ticket
    5. Flip the event to sold_out if the reservation filled it
    6. Commit, then mark the reservation committed

    Any failure rolls the transaction back, so neither the increment nor the
    ticket becomes visible.
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
        self.bulk_max_concurrency = settings.BULK_MAX_CONCURRENCY
        self.bulk_max_items = settings.BULK_MAX_ITEMS

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
    async def purchase(
        self,
        *,
        event_id: int,
        user_id: int,
        ticket_type: str,
        price: int,
        price_override: bool = False,
    ) -> TicketEntity:
        with tracer.start_as_current_span(
            'use_case.purchase_ticket',
            attributes={'event_id': event_id, 'user_id': user_id},
        ):
            return await self._purchase(
                event_id=event_id,
                user_id=user_id,
                ticket_type=ticket_type,
                price=price,
                price_override=price_override,
                mode='single',
            )

    @Logger.io
    async def purchase_bulk(
        self,
        *,
        event_id: int,
        user_ids: List[int],
        ticket_type: str,
        actor: UserEntity,
        price: Optional[int] = None,
        price_override: bool = False,
    ) -> List[BulkItemOutcome[TicketEntity]]:
        """
        Independent purchase per user id. Items run concurrently (bounded);
        each reservation is still serialized by the event lock. Outcomes are
        returned in input order and one failure never aborts the batch.

        Bulk issuance is for the event organizer or an admin; price defaults to
        the event base_price.
        """
        if not user_ids:
            raise ValidationError('user_ids cannot be empty')
        if len(user_ids) > self.bulk_max_items:
            raise ValidationError(f'At most {self.bulk_max_items} items per bulk request')

        event = await self._load_event(event_id=event_id)
        if not actor.can_manage_event(event):
            raise ForbiddenError('Only the event organizer or an admin can issue tickets in bulk')
        if price is None:
            price = event.base_price or 0

        outcomes: List[Optional[BulkItemOutcome[TicketEntity]]] = [None] * len(user_ids)
        limiter = anyio.CapacityLimiter(self.bulk_max_concurrency)

        async def purchase_item(index: int, user_id: int) -> None:
            async with limiter:
                try:
                    ticket = await self._purchase(
                        event_id=event_id,
                        user_id=user_id,
                        ticket_type=ticket_type,
                        price=price,
                        price_override=price_override,
                        mode='bulk',
                    )
                    outcomes[index] = BulkItemOutcome.success(
                        index=index, result=ticket, status_code=201
                    )
                except CustomBaseError as e:
                    outcomes[index] = BulkItemOutcome.failure(index=index, error=e)

        with tracer.start_as_current_span(
            'use_case.purchase_bulk',
            attributes={'event_id': event_id, 'items': len(user_ids)},
        ):
            async with anyio.create_task_group() as tg:
                for index, user_id in enumerate(user_ids):
                    tg.start_soon(purchase_item, index, user_id)

        results = [outcome for outcome in outcomes if outcome is not None]
        succeeded = sum(1 for outcome in results if outcome.succeeded)
        Logger.base.info(
            f'📦 [BULK_PURCHASE] event={event_id} succeeded={succeeded} '
            f'failed={len(results) - succeeded}'
        )
        return results

    async def _load_event(self, *, event_id: int) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        return event

    async def _purchase(
        self,
        *,
        event_id: int,
        user_id: int,
        ticket_type: str,
        price: int,
        price_override: bool,
        mode: str,
    ) -> TicketEntity:
        started = time.perf_counter()
        try:
            ticket = await retry_on_transient_conflict(
                lambda: self._purchase_once(
                    event_id=event_id,
                    user_id=user_id,
                    ticket_type=ticket_type,
                    price=price,
                    price_override=price_override,
                ),
                max_attempts=self.max_attempts,
                backoff_seconds=self.retry_backoff_seconds,
                label='PURCHASE',
            )
        except CustomBaseError as e:
            metrics.record_purchase(
                event_id=event_id,
                mode=mode,
                result=e.code,
                duration=time.perf_counter() - started,
            )
            raise

        metrics.record_purchase(
            event_id=event_id, mode=mode, result='success', duration=time.perf_counter() - started
        )
        return ticket

    async def _purchase_once(
        self,
        *,
        event_id: int,
        user_id: int,
        ticket_type: str,
        price: int,
        price_override: bool,
    ) -> TicketEntity:
        token: Optional[ReservationToken] = None

        async with self.event_lock_registry.hold(event_id):
            async with self.uow_factory() as uow:
                try:
                    now = self.clock()
                    event = await uow.event_repo.get_by_id(event_id=event_id, for_update=True)
                    if event is None:
                        raise NotFoundError(f'Event {event_id} not found')
                    if await uow.user_repo.get_by_id(user_id=user_id) is None:
                        raise NotFoundError(f'User {user_id} not found')

                    EventLifecycle.ensure_can_sell(event, now)
                    ticket = TicketEntity.issue(
                        event=event,
                        user_id=user_id,
                        ticket_type=ticket_type,
                        price_paid=price,
                        price_override=price_override,
                        now=now,
                    )

                    token = await uow.capacity_ledger.reserve(event_id=event_id, count=1)
                    created = await uow.ticket_repo.create(ticket=ticket)
                    synced = await sync_event_capacity_status(uow, event_id=event_id)

                    await uow.commit()
                except Exception:
                    if token is not None:
                        # Still pending: the rollback on exit discards the increment
                        await uow.capacity_ledger.release(token)
                    raise

            assert token is not None
            uow.capacity_ledger.commit(token)

        metrics.update_remaining_capacity(event_id=event_id, remaining=synced.remaining_capacity)
        Logger.base.info(
            f'🎫 [PURCHASE] ticket={created.id} event={event_id} user={user_id} '
            f'({synced.current_attendee_count}/{synced.max_attendees}, {synced.status.value})'
        )
        return created
