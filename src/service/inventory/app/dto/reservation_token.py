"""Capacity reservation token."""

from enum import Enum

import attrs
import uuid_utils


class ReservationState(Enum):
    PENDING = 'pending'  # Increment written in an open transaction
    COMMITTED = 'committed'  # Transaction committed; the units are held
    RELEASED = 'released'  # Units returned to the event


@attrs.define
class ReservationToken:
    """
    Handle on `count` capacity units of one event.

    The ledger moves it pending -> committed -> released; `release` reads
    the state and only returns committed units.
    """

    event_id: int
    count: int
    state: ReservationState = ReservationState.PENDING
    id: str = attrs.field(factory=lambda: str(uuid_utils.uuid7()))

    @classmethod
    def for_committed_units(cls, *, event_id: int, count: int = 1) -> 'ReservationToken':
        """Token for units already held by persisted tickets (cancel/refund/cascade)."""
        return cls(event_id=event_id, count=count, state=ReservationState.COMMITTED)
