"""
Integration tests for CancelEventUseCase

Test Focus:
1. Cascade: every active/checked_in ticket moves with the event, capacity returns to 0
2. Cancelling again is an invalid transition and changes nothing
3. Drafts cancel without touching tickets
4. No purchase succeeds once cancelled
"""

import pytest

from src.platform.exception.exceptions import ForbiddenError
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.inventory_errors import (
    EventNotPublishedError,
    InvalidTransitionError,
)


@pytest.mark.integration
class TestCancelEventCascade:
    async def test_cancel_with_refunds(
        self,
        seed,
        organizer,
        venue,
        attendee,
        cancel_event_use_case,
        check_in_use_case,
        clock,
        uow_factory,
    ) -> None:
        # Given: 10 sold tickets, 3 of them already checked in
        event = await seed.event(organizer=organizer, venue=venue)
        tickets = [await seed.ticket(event=event, user=attendee) for _ in range(10)]
        clock.set(event.start)
        for ticket in tickets[:3]:
            await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer)

        # When
        result = await cancel_event_use_case.execute(
            event_id=event.id, actor=organizer, issue_refunds=True
        )

        # Then: all 10 refunded and the counter is back at 0
        assert result.affected_tickets == 10
        assert result.refunded is True
        assert result.event.status == EventStatus.CANCELLED
        assert result.event.current_attendee_count == 0

        async with uow_factory() as uow:
            stored = await uow.ticket_repo.list_by_event(event_id=event.id)
        assert {ticket.status for ticket in stored} == {TicketStatus.REFUNDED}
        assert all(ticket.capacity_released for ticket in stored)
        assert all(ticket.refunded_at is not None for ticket in stored)

    async def test_cancel_without_refunds(
        self, seed, organizer, venue, attendee, cancel_event_use_case, uow_factory
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        for _ in range(4):
            await seed.ticket(event=event, user=attendee)

        result = await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        assert result.affected_tickets == 4
        async with uow_factory() as uow:
            stored = await uow.ticket_repo.list_by_event(event_id=event.id)
        assert {ticket.status for ticket in stored} == {TicketStatus.CANCELLED}

    async def test_already_cancelled_tickets_are_left_alone(
        self, seed, organizer, venue, attendee, cancel_event_use_case, cancel_ticket_use_case
    ) -> None:
        # Given: one of three tickets was cancelled by its holder
        event = await seed.event(organizer=organizer, venue=venue)
        tickets = [await seed.ticket(event=event, user=attendee) for _ in range(3)]
        await cancel_ticket_use_case.execute(ticket_id=tickets[0].id, actor=attendee)

        # When
        result = await cancel_event_use_case.execute(
            event_id=event.id, actor=organizer, issue_refunds=True
        )

        # Then: only the two live tickets move; that unit is not returned twice
        assert result.affected_tickets == 2
        assert result.event.current_attendee_count == 0
        assert (await seed.reload_ticket(tickets[0].id)).status == TicketStatus.CANCELLED

    async def test_sold_out_event_can_be_cancelled(
        self, seed, organizer, venue, attendee, purchase_use_case, cancel_event_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue, max_attendees=1)
        await purchase_use_case.purchase(
            event_id=event.id, user_id=attendee.id, ticket_type='general', price=5000
        )

        result = await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        assert result.event.status == EventStatus.CANCELLED
        assert result.event.current_attendee_count == 0


@pytest.mark.integration
class TestCancelEventRules:
    async def test_cancel_twice(
        self, seed, organizer, venue, attendee, cancel_event_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        await seed.ticket(event=event, user=attendee)
        await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        with pytest.raises(InvalidTransitionError):
            await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        reloaded = await seed.reload_event(event.id)
        assert reloaded.status == EventStatus.CANCELLED
        assert reloaded.current_attendee_count == 0

    async def test_draft_cancel(self, seed, organizer, venue, cancel_event_use_case) -> None:
        event = await seed.event(organizer=organizer, venue=venue, status=EventStatus.DRAFT)

        result = await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        assert result.event.status == EventStatus.CANCELLED
        assert result.affected_tickets == 0

    async def test_completed_event_cannot_be_cancelled(
        self, seed, organizer, venue, cancel_event_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue, status=EventStatus.COMPLETED)

        with pytest.raises(InvalidTransitionError):
            await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

    async def test_only_owner_or_admin(
        self, seed, organizer, admin, venue, cancel_event_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        other = await seed.user(UserRole.ORGANIZER)

        with pytest.raises(ForbiddenError):
            await cancel_event_use_case.execute(event_id=event.id, actor=other)

        result = await cancel_event_use_case.execute(event_id=event.id, actor=admin)
        assert result.event.status == EventStatus.CANCELLED

    async def test_no_purchase_after_cancel(
        self, seed, organizer, venue, attendee, cancel_event_use_case, purchase_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        await cancel_event_use_case.execute(event_id=event.id, actor=organizer)

        with pytest.raises(EventNotPublishedError):
            await purchase_use_case.purchase(
                event_id=event.id, user_id=attendee.id, ticket_type='general', price=5000
            )
