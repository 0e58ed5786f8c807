from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.inventory.app.dto.venue_availability import VenueBooking
from src.service.inventory.domain.value_object.time_window import TimeWindow


class IVenueSchedulingGuard(ABC):
    @abstractmethod
    async def has_conflict(
        self,
        *,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[int] = None,
    ) -> bool:
        """True if an event holding the venue overlaps [start, end)."""
        pass

    @abstractmethod
    async def list_bookings(self, *, venue_id: int, window: TimeWindow) -> List[VenueBooking]:
        pass
