from datetime import datetime
from typing import Optional

import attrs

from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.value_object.time_window import (
    TimeWindow,
    optional_utc,
    to_utc,
)


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


@attrs.define
class EventEntity:
    """
    Event record. `status` and `current_attendee_count` are only changed
    through EventLifecycle and the capacity ledger.
    """

    name: str = attrs.field(validator=_validate_non_empty_string)
    organizer_id: int
    description: str = ''
    venue_id: Optional[int] = None
    start: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    end: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    base_price: Optional[int] = None
    max_attendees: Optional[int] = None
    current_attendee_count: int = 0
    status: EventStatus = EventStatus.DRAFT
    version: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    updated_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)

    @property
    def window(self) -> Optional[TimeWindow]:
        if self.start is None or self.end is None:
            return None
        return TimeWindow(start=self.start, end=self.end)

    @property
    def remaining_capacity(self) -> int:
        return max((self.max_attendees or 0) - self.current_attendee_count, 0)

    @property
    def is_full(self) -> bool:
        return self.max_attendees is not None and self.current_attendee_count >= self.max_attendees

    def has_started(self, now: datetime) -> bool:
        return self.start is not None and self.start <= to_utc(now)

    def has_ended(self, now: datetime) -> bool:
        return self.end is not None and self.end <= to_utc(now)
