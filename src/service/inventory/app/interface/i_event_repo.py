from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.enum.event_status import EventStatus


class IEventRepo(ABC):
    """Event Repository Interface. Never writes current_attendee_count (see ICapacityLedger)."""

    @abstractmethod
    async def get_by_id(self, *, event_id: int, for_update: bool = False) -> Optional[EventEntity]:
        """for_update takes a row lock until the transaction ends."""
        pass

    @abstractmethod
    async def create(self, *, event: EventEntity) -> EventEntity:
        pass

    @abstractmethod
    async def update_details(self, *, event: EventEntity) -> EventEntity:
        """Persist descriptive and scheduling fields of a draft event."""
        pass

    @abstractmethod
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> bool:
        """Conditional status write; False when the stored status is no longer from_status."""
        pass

    @abstractmethod
    async def list_ended_event_ids(self, *, now: datetime, limit: int = 100) -> List[int]:
        """Published or sold-out events whose end has passed."""
        pass

    @abstractmethod
    async def delete(self, *, event_id: int) -> None:
        pass
