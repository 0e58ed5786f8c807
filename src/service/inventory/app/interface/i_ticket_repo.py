from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.enum.ticket_status import TicketStatus


class ITicketRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: int, for_update: bool = False) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: int, statuses: Optional[Iterable[TicketStatus]] = None
    ) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def count_by_event(
        self, *, event_id: int, statuses: Optional[Iterable[TicketStatus]] = None
    ) -> int:
        pass

    @abstractmethod
    async def update_status(self, *, ticket: TicketEntity, from_status: TicketStatus) -> bool:
        """Write status and timestamps only if the stored status still equals from_status."""
        pass

    @abstractmethod
    async def bulk_update_status(
        self,
        *,
        event_id: int,
        from_statuses: Iterable[TicketStatus],
        to_status: TicketStatus,
        now: datetime,
    ) -> int:
        """Single statement over all tickets of the event; returns affected rows."""
        pass

    @abstractmethod
    async def mark_capacity_released(self, *, ticket_id: int) -> bool:
        """Flip capacity_released false -> true. True only for the caller that flipped it."""
        pass

    @abstractmethod
    async def bulk_mark_capacity_released(
        self, *, event_id: int, statuses: Iterable[TicketStatus]
    ) -> int:
        pass
