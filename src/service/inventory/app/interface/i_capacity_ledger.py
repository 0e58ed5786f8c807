"""
Capacity Ledger Interface

The ledger is the only writer of an event's current_attendee_count.
"""

from abc import ABC, abstractmethod

from src.service.inventory.app.dto.reservation_token import ReservationToken


class ICapacityLedger(ABC):
    @abstractmethod
    async def reserve(self, *, event_id: int, count: int = 1) -> ReservationToken:
        """
        Atomically add `count` units if they fit under max_attendees.

        Raises:
            NotFoundError: event does not exist
            CapacityExceededError: current + count > max_attendees
        """
        pass

    @abstractmethod
    def commit(self, token: ReservationToken) -> None:
        """Mark a pending token committed once its transaction has committed."""
        pass

    @abstractmethod
    async def release(self, token: ReservationToken) -> bool:
        """
        Return a committed token's units. Releasing a pending or already
        released token is a no-op and returns False.
        """
        pass

    @abstractmethod
    async def committed_count(self, *, event_id: int) -> int:
        pass
