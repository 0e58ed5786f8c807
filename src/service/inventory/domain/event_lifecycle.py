"""
Event Lifecycle State Machine

Pure domain rules for event status: every status change goes through
`EventLifecycle.transition`, which validates the pair against
EVENT_TRANSITIONS. No infrastructure access; callers pass in the venue,
the scheduling-conflict answer and the current time.
"""

from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

import attrs

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.inventory_errors import (
    CapacityExceededError,
    EventNotPublishedError,
    InvalidTransitionError,
    SchedulingConflictError,
)
from src.service.inventory.domain.value_object.time_window import to_utc


EVENT_TRANSITIONS: Dict[EventStatus, FrozenSet[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.PUBLISHED, EventStatus.CANCELLED}),
    EventStatus.PUBLISHED: frozenset(
        {EventStatus.SOLD_OUT, EventStatus.CANCELLED, EventStatus.COMPLETED}
    ),
    EventStatus.SOLD_OUT: frozenset(
        {EventStatus.PUBLISHED, EventStatus.CANCELLED, EventStatus.COMPLETED}
    ),
    EventStatus.CANCELLED: frozenset(),
    EventStatus.COMPLETED: frozenset(),
}

TERMINAL_EVENT_STATUSES = frozenset(s for s, targets in EVENT_TRANSITIONS.items() if not targets)

# Statuses that occupy the venue for their time window
VENUE_HOLDING_STATUSES = frozenset(
    {EventStatus.PUBLISHED, EventStatus.SOLD_OUT, EventStatus.COMPLETED}
)

DELETABLE_EVENT_STATUSES = frozenset({EventStatus.DRAFT, EventStatus.CANCELLED})


class EventLifecycle:
    @staticmethod
    def can_transition(from_status: EventStatus, to_status: EventStatus) -> bool:
        return to_status in EVENT_TRANSITIONS[from_status]

    @classmethod
    def transition(cls, event: EventEntity, to_status: EventStatus) -> EventEntity:
        if not cls.can_transition(event.status, to_status):
            raise InvalidTransitionError(
                f'Event {event.id} cannot move from {event.status.value} to {to_status.value}'
            )
        return attrs.evolve(event, status=to_status)

    @staticmethod
    def publish_problems(
        event: EventEntity, venue: Optional[VenueEntity], now: datetime
    ) -> List[str]:
        now = to_utc(now)
        problems: List[str] = []
        if event.venue_id is None:
            problems.append('venue is required')
        elif venue is None:
            problems.append(f'venue {event.venue_id} does not exist')
        elif not venue.is_active:
            problems.append(f'venue {venue.id} is closed')

        if event.start is None or event.end is None:
            problems.append('start and end are required')
        else:
            if not event.start > now:
                problems.append('start must be in the future')
            if not event.end > event.start:
                problems.append('end must be after start')

        if event.base_price is None:
            problems.append('base_price is required')
        elif event.base_price < 0:
            problems.append('base_price cannot be negative')

        if event.max_attendees is None:
            problems.append('max_attendees is required')
        elif event.max_attendees <= 0:
            problems.append('max_attendees must be positive')
        elif venue is not None and event.max_attendees > venue.capacity:
            problems.append(
                f'max_attendees {event.max_attendees} exceeds venue capacity {venue.capacity}'
            )
        return problems

    @classmethod
    def publish(
        cls,
        event: EventEntity,
        *,
        venue: Optional[VenueEntity],
        has_conflict: bool,
        now: datetime,
    ) -> EventEntity:
        if event.status != EventStatus.DRAFT:
            raise InvalidTransitionError(
                f'Event {event.id} cannot be published from {event.status.value}'
            )

        if problems := cls.publish_problems(event, venue, now):
            raise ValidationError(f'Event {event.id} is not publishable: {"; ".join(problems)}')

        if has_conflict:
            raise SchedulingConflictError(
                f'Event {event.id} overlaps another event at venue {event.venue_id}'
            )

        return cls.transition(event, EventStatus.PUBLISHED)

    @classmethod
    def sync_capacity_status(cls, event: EventEntity) -> EventEntity:
        """published <-> sold_out follows the counter; other statuses are left alone."""
        if event.status == EventStatus.PUBLISHED and event.is_full:
            return cls.transition(event, EventStatus.SOLD_OUT)
        if event.status == EventStatus.SOLD_OUT and not event.is_full:
            return cls.transition(event, EventStatus.PUBLISHED)
        return event

    @classmethod
    def cancel(cls, event: EventEntity) -> EventEntity:
        return cls.transition(event, EventStatus.CANCELLED)

    @classmethod
    def complete(cls, event: EventEntity, *, now: datetime) -> EventEntity:
        if not event.has_ended(now):
            raise InvalidTransitionError(f'Event {event.id} has not ended yet')
        return cls.transition(event, EventStatus.COMPLETED)

    @staticmethod
    def should_complete(event: EventEntity, now: datetime) -> bool:
        return event.status in (EventStatus.PUBLISHED, EventStatus.SOLD_OUT) and event.has_ended(
            now
        )

    @staticmethod
    def ensure_can_sell(event: EventEntity, now: datetime) -> None:
        if event.status == EventStatus.SOLD_OUT:
            raise CapacityExceededError(f'Event {event.id} is sold out')
        if event.status != EventStatus.PUBLISHED:
            raise EventNotPublishedError(
                f'Event {event.id} is {event.status.value}, tickets are not on sale'
            )
        if event.has_ended(now):
            raise EventNotPublishedError(f'Event {event.id} has ended, tickets are not on sale')

    @staticmethod
    def ensure_editable(event: EventEntity) -> None:
        if event.status != EventStatus.DRAFT:
            raise InvalidTransitionError(
                f'Event {event.id} is {event.status.value}; only draft events can be edited'
            )

    @staticmethod
    def ensure_deletable(event: EventEntity, *, ticket_count: int) -> None:
        if event.status not in DELETABLE_EVENT_STATUSES:
            raise ConflictError(
                f'Event {event.id} is {event.status.value}; only draft or cancelled events can be deleted'
            )
        if ticket_count:
            raise ConflictError(f'Event {event.id} is referenced by {ticket_count} tickets')
