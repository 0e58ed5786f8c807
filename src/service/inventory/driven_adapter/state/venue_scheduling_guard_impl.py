"""
Venue Scheduling Guard (SQLAlchemy)

Two windows at the same venue conflict iff start1 < end2 AND start2 < end1,
so events that only touch (end1 == start2) never conflict. Only events that
hold the venue are considered: drafts and cancelled events do not.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.venue_availability import VenueBooking
from src.service.inventory.app.interface.i_venue_scheduling_guard import IVenueSchedulingGuard
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.event_lifecycle import VENUE_HOLDING_STATUSES
from src.service.inventory.domain.value_object.time_window import TimeWindow, to_utc
from src.service.inventory.driven_adapter.model.event_model import EventModel


class VenueSchedulingGuardImpl(IVenueSchedulingGuard):
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _overlapping(*, venue_id: int, start: datetime, end: datetime):
        return (
            EventModel.venue_id == venue_id,
            EventModel.status.in_([s.value for s in VENUE_HOLDING_STATUSES]),
            EventModel.start < end,
            EventModel.end > start,
        )

    @Logger.io
    async def has_conflict(
        self,
        *,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[int] = None,
    ) -> bool:
        stmt = select(func.count(EventModel.id)).where(
            *self._overlapping(venue_id=venue_id, start=to_utc(start), end=to_utc(end))
        )
        if exclude_event_id is not None:
            stmt = stmt.where(EventModel.id != exclude_event_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one()) > 0

    @Logger.io
    async def list_bookings(self, *, venue_id: int, window: TimeWindow) -> List[VenueBooking]:
        result = await self.session.execute(
            select(EventModel)
            .where(*self._overlapping(venue_id=venue_id, start=window.start, end=window.end))
            .order_by(EventModel.start)
        )
        return [
            VenueBooking(
                event_id=model.id,
                name=model.name,
                start=to_utc(model.start),  # type: ignore[arg-type]
                end=to_utc(model.end),  # type: ignore[arg-type]
                status=EventStatus(model.status),
            )
            for model in result.scalars().all()
        ]
