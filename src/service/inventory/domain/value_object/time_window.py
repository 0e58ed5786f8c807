from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

import attrs

from src.platform.exception.exceptions import ValidationError


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return to_utc(value) if value is not None else None


@attrs.define(frozen=True)
class TimeWindow:
    """Half-open interval [start, end): windows that only touch do not overlap."""

    start: datetime = attrs.field(converter=to_utc)
    end: datetime = attrs.field(converter=to_utc)

    def __attrs_post_init__(self) -> None:
        if self.end <= self.start:
            raise ValidationError('Event end must be after its start')

    def overlaps(self, other: 'TimeWindow') -> bool:
        return self.start < other.end and other.start < self.end

    @classmethod
    def for_day(cls, day: date) -> 'TimeWindow':
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        return cls(start=start, end=start + timedelta(days=1))


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
