"""
Capacity helpers shared by the purchase, cancel, refund and cascade paths.

Both run inside the caller's Unit of Work while the caller holds the event lock.
"""

from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics
from src.service.inventory.app.dto.reservation_token import ReservationToken
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.inventory_errors import InvalidTransitionError


async def sync_event_capacity_status(uow: AbstractUnitOfWork, *, event_id: int) -> EventEntity:
    """Re-read the counter and flip published <-> sold_out when it crossed max_attendees."""
    event = await uow.event_repo.get_by_id(event_id=event_id)
    if event is None:
        raise NotFoundError(f'Event {event_id} not found')

    synced = EventLifecycle.sync_capacity_status(event)
    if synced.status == event.status:
        return event

    if not await uow.event_repo.update_status(
        event_id=event_id, from_status=event.status, to_status=synced.status
    ):
        raise InvalidTransitionError(f'Event {event_id} changed status concurrently')

    Logger.base.info(
        f'🔁 [CAPACITY] event={event_id} {event.status.value} -> {synced.status.value} '
        f'({synced.current_attendee_count}/{synced.max_attendees})'
    )
    metrics.record_event_transition(from_status=event.status.value, to_status=synced.status.value)
    return synced


async def release_ticket_capacity(
    uow: AbstractUnitOfWork, *, ticket: TicketEntity, reason: str
) -> Optional[EventEntity]:
    """
    Return the ticket's unit to its event exactly once.

    The capacity_released flag is flipped with a conditional UPDATE first;
    only the caller that flipped it touches the counter. Returns the synced
    event, or None when the unit had already been returned.
    """
    assert ticket.id is not None
    if not await uow.ticket_repo.mark_capacity_released(ticket_id=ticket.id):
        Logger.base.warning(f'⚠️ [CAPACITY] ticket={ticket.id} capacity already released')
        return None

    await uow.capacity_ledger.release(
        ReservationToken.for_committed_units(event_id=ticket.event_id, count=1)
    )
    metrics.record_capacity_release(reason=reason)
    return await sync_event_capacity_status(uow, event_id=ticket.event_id)
