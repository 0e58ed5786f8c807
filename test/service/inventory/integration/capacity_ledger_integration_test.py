"""
Integration tests for CapacityLedgerImpl

Test Focus:
1. reserve never lets the counter pass max_attendees
2. Rolled back reservations vanish with their transaction
3. release is a no-op for pending or already released tokens
"""

import pytest

from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.service.inventory.app.dto.reservation_token import ReservationState, ReservationToken
from src.service.inventory.domain.inventory_errors import CapacityExceededError


@pytest.mark.integration
class TestCapacityLedger:
    async def test_reserve_up_to_max(self, seed, organizer, venue, uow_factory) -> None:
        # Given: an event with 3 seats
        event = await seed.event(organizer=organizer, venue=venue, max_attendees=3)

        # When: 3 units are reserved in one step
        async with uow_factory() as uow:
            token = await uow.capacity_ledger.reserve(event_id=event.id, count=3)
            await uow.commit()
        uow.capacity_ledger.commit(token)

        # Then
        assert token.state == ReservationState.COMMITTED
        reloaded = await seed.reload_event(event.id)
        assert reloaded.current_attendee_count == 3

    async def test_reserve_past_max_is_rejected(self, seed, organizer, venue, uow_factory) -> None:
        event = await seed.event(organizer=organizer, venue=venue, max_attendees=2)

        async with uow_factory() as uow:
            await uow.capacity_ledger.reserve(event_id=event.id, count=2)
            with pytest.raises(CapacityExceededError, match='0 of 2 seats left, 1 requested'):
                await uow.capacity_ledger.reserve(event_id=event.id, count=1)
            await uow.commit()

        assert (await seed.reload_event(event.id)).current_attendee_count == 2

    async def test_uncommitted_reservation_is_discarded(
        self, seed, organizer, venue, uow_factory
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue, max_attendees=2)

        async with uow_factory() as uow:
            token = await uow.capacity_ledger.reserve(event_id=event.id, count=1)
            # leaving without commit rolls back

        assert token.state == ReservationState.PENDING
        assert (await seed.reload_event(event.id)).current_attendee_count == 0

    async def test_release_is_idempotent(self, seed, organizer, venue, uow_factory) -> None:
        event = await seed.event(organizer=organizer, venue=venue, max_attendees=5)
        async with uow_factory() as uow:
            token = await uow.capacity_ledger.reserve(event_id=event.id, count=2)
            await uow.commit()
        uow.capacity_ledger.commit(token)

        async with uow_factory() as uow:
            assert await uow.capacity_ledger.release(token) is True
            assert await uow.capacity_ledger.release(token) is False
            await uow.commit()

        assert token.state == ReservationState.RELEASED
        assert (await seed.reload_event(event.id)).current_attendee_count == 0

    async def test_release_of_pending_token_is_noop(
        self, seed, organizer, venue, uow_factory
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)

        async with uow_factory() as uow:
            released = await uow.capacity_ledger.release(ReservationToken(event_id=event.id, count=1))

        assert released is False

    async def test_unknown_event(self, uow_factory) -> None:
        async with uow_factory() as uow:
            with pytest.raises(NotFoundError):
                await uow.capacity_ledger.reserve(event_id=404, count=1)

    async def test_count_must_be_positive(self, seed, organizer, venue, uow_factory) -> None:
        event = await seed.event(organizer=organizer, venue=venue)

        async with uow_factory() as uow:
            with pytest.raises(ValidationError):
                await uow.capacity_ledger.reserve(event_id=event.id, count=0)

    async def test_committed_count(self, seed, organizer, venue, attendee, uow_factory) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        for _ in range(4):
            await seed.ticket(event=event, user=attendee)

        async with uow_factory() as uow:
            assert await uow.capacity_ledger.committed_count(event_id=event.id) == 4
