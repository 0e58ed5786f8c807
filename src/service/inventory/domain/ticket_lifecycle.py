"""
Ticket Lifecycle State Machine

Status changes for a single ticket are validated against TICKET_TRANSITIONS.
Event cancellation is the only path allowed to move a checked-in ticket to
cancelled; it uses CASCADE_TRANSITIONS instead.
"""

from datetime import datetime
from typing import Dict, FrozenSet

import attrs

from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.inventory_errors import (
    AlreadyCheckedInError,
    EventAlreadyOccurredError,
    InvalidTransitionError,
)


TICKET_TRANSITIONS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.ACTIVE: frozenset(
        {TicketStatus.CHECKED_IN, TicketStatus.CANCELLED, TicketStatus.REFUNDED}
    ),
    TicketStatus.CHECKED_IN: frozenset({TicketStatus.REFUNDED}),
    TicketStatus.CANCELLED: frozenset(),
    TicketStatus.REFUNDED: frozenset(),
}

CASCADE_TRANSITIONS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.ACTIVE: frozenset({TicketStatus.CANCELLED, TicketStatus.REFUNDED}),
    TicketStatus.CHECKED_IN: frozenset({TicketStatus.CANCELLED, TicketStatus.REFUNDED}),
}

# Tickets in these statuses count toward the event's attendee counter
CAPACITY_HOLDING_STATUSES = frozenset({TicketStatus.ACTIVE, TicketStatus.CHECKED_IN})


class TicketLifecycle:
    @staticmethod
    def can_transition(from_status: TicketStatus, to_status: TicketStatus) -> bool:
        return to_status in TICKET_TRANSITIONS[from_status]

    @classmethod
    def _ensure_transition(cls, ticket: TicketEntity, to_status: TicketStatus) -> None:
        if not cls.can_transition(ticket.status, to_status):
            raise InvalidTransitionError(
                f'Ticket {ticket.id} cannot move from {ticket.status.value} to {to_status.value}'
            )

    @classmethod
    def check_in(cls, ticket: TicketEntity, *, event: EventEntity, now: datetime) -> TicketEntity:
        if ticket.status == TicketStatus.CHECKED_IN:
            raise AlreadyCheckedInError(f'Ticket {ticket.id} is already checked in')
        cls._ensure_transition(ticket, TicketStatus.CHECKED_IN)
        if event.has_ended(now):
            raise EventAlreadyOccurredError(
                f'Event {event.id} has ended, ticket {ticket.id} can no longer be checked in'
            )
        return attrs.evolve(ticket, status=TicketStatus.CHECKED_IN, checked_in_at=now)

    @classmethod
    def cancel(cls, ticket: TicketEntity, *, event: EventEntity, now: datetime) -> TicketEntity:
        cls._ensure_transition(ticket, TicketStatus.CANCELLED)
        if event.has_started(now):
            raise EventAlreadyOccurredError(
                f'Event {event.id} has already started, ticket {ticket.id} cannot be cancelled'
            )
        return attrs.evolve(ticket, status=TicketStatus.CANCELLED, cancelled_at=now)

    @classmethod
    def refund(cls, ticket: TicketEntity, *, now: datetime) -> TicketEntity:
        cls._ensure_transition(ticket, TicketStatus.REFUNDED)
        return attrs.evolve(ticket, status=TicketStatus.REFUNDED, refunded_at=now)

    @staticmethod
    def cascade_target(*, issue_refunds: bool) -> TicketStatus:
        return TicketStatus.REFUNDED if issue_refunds else TicketStatus.CANCELLED

    @staticmethod
    def cascade_sources(target: TicketStatus) -> FrozenSet[TicketStatus]:
        return frozenset(
            source for source, targets in CASCADE_TRANSITIONS.items() if target in targets
        )
