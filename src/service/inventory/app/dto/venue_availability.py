"""Venue availability DTOs."""

from datetime import date, datetime
from typing import List, Optional

import attrs

from src.service.inventory.domain.enum.event_status import EventStatus


@attrs.define(frozen=True)
class VenueBooking:
    """One event holding the venue for its window."""

    event_id: int
    name: str
    start: datetime
    end: datetime
    status: EventStatus


@attrs.define(frozen=True)
class VenueAvailabilityResult:
    """
    Bookings of a venue on a day, plus the conflict answer for a requested
    window when one was given (`has_conflict` is None otherwise).
    """

    venue_id: int
    date: Optional[date]
    bookings: List[VenueBooking]
    has_conflict: Optional[bool] = None
