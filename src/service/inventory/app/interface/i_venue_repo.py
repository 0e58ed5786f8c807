from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.venue_status import VenueStatus


class IVenueRepo(ABC):
    @abstractmethod
    async def create(self, *, venue: VenueEntity) -> VenueEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, venue_id: int) -> Optional[VenueEntity]:
        pass

    @abstractmethod
    async def update_status(self, *, venue_id: int, status: VenueStatus) -> Optional[VenueEntity]:
        pass

    @abstractmethod
    async def count_upcoming_events(self, *, venue_id: int, now: datetime) -> int:
        """Events at the venue with start > now that are neither cancelled nor completed."""
        pass

    @abstractmethod
    async def count_events(self, *, venue_id: int) -> int:
        pass

    @abstractmethod
    async def delete(self, *, venue_id: int) -> None:
        pass
