"""
Integration tests for ticket check-in, cancel and refund

Test Focus:
1. Double check-in: the second call fails, racing calls let exactly one win
2. Cancel returns capacity exactly once
3. Refund after check-in returns capacity
4. Bulk check-in reports per item
"""

from datetime import timedelta

import anyio
import pytest

from src.platform.exception.exceptions import CustomBaseError, ForbiddenError
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.inventory_errors import (
    AlreadyCheckedInError,
    EventAlreadyOccurredError,
    InvalidTransitionError,
)


@pytest.mark.integration
class TestCheckIn:
    async def test_double_check_in(
        self, seed, organizer, venue, attendee, check_in_use_case, clock
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        clock.set(event.start)

        checked_in = await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer)
        assert checked_in.status == TicketStatus.CHECKED_IN

        with pytest.raises(AlreadyCheckedInError):
            await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer)

        stored = await seed.reload_ticket(ticket.id)
        assert stored.status == TicketStatus.CHECKED_IN
        # Check-in never touches capacity
        assert (await seed.reload_event(event.id)).current_attendee_count == 1

    async def test_racing_check_ins(
        self, seed, organizer, venue, attendee, check_in_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        results: list[object] = []

        async def check_in() -> None:
            try:
                results.append(await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer))
            except CustomBaseError as e:
                results.append(e)

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(check_in)

        errors = [r for r in results if isinstance(r, CustomBaseError)]
        assert len(results) - len(errors) == 1
        assert all(isinstance(e, AlreadyCheckedInError) for e in errors)

    async def test_after_event_end(
        self, seed, organizer, venue, attendee, check_in_use_case, clock
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        clock.set(event.end)

        with pytest.raises(EventAlreadyOccurredError):
            await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer)

    async def test_attendee_cannot_check_in(
        self, seed, organizer, venue, attendee, check_in_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)

        with pytest.raises(ForbiddenError):
            await check_in_use_case.execute(ticket_id=ticket.id, actor=attendee)

    async def test_bulk_check_in(
        self, seed, organizer, venue, attendee, check_in_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        other_event = await seed.event(
            organizer=organizer,
            venue=venue,
            start=event.end,
            end=event.end + timedelta(hours=2),
        )
        first = await seed.ticket(event=event, user=attendee)
        second = await seed.ticket(event=event, user=attendee)
        foreign = await seed.ticket(event=other_event, user=attendee)
        await check_in_use_case.execute(ticket_id=second.id, actor=organizer)

        outcomes = await check_in_use_case.execute_bulk(
            event_id=event.id, ticket_ids=[first.id, second.id, foreign.id], actor=organizer
        )

        assert [outcome.succeeded for outcome in outcomes] == [True, False, False]
        assert outcomes[1].error_code == 'ALREADY_CHECKED_IN'
        assert outcomes[2].error_code == 'NOT_FOUND'


@pytest.mark.integration
class TestCancelAndRefund:
    async def test_cancel_twice_releases_once(
        self, seed, organizer, venue, attendee, cancel_ticket_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        await seed.ticket(event=event, user=attendee)

        cancelled = await cancel_ticket_use_case.execute(ticket_id=ticket.id, actor=attendee)
        assert cancelled.status == TicketStatus.CANCELLED

        with pytest.raises(InvalidTransitionError):
            await cancel_ticket_use_case.execute(ticket_id=ticket.id, actor=attendee)

        assert (await seed.reload_event(event.id)).current_attendee_count == 1

    async def test_cancel_after_start(
        self, seed, organizer, venue, attendee, cancel_ticket_use_case, clock
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        clock.set(event.start)

        with pytest.raises(EventAlreadyOccurredError):
            await cancel_ticket_use_case.execute(ticket_id=ticket.id, actor=attendee)

        assert (await seed.reload_event(event.id)).current_attendee_count == 1

    async def test_only_holder_cancels(
        self, seed, organizer, venue, attendee, cancel_ticket_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        stranger = await seed.user()

        with pytest.raises(ForbiddenError):
            await cancel_ticket_use_case.execute(ticket_id=ticket.id, actor=stranger)

    async def test_refund_checked_in_ticket(
        self, seed, organizer, venue, attendee, check_in_use_case, refund_ticket_use_case
    ) -> None:
        event = await seed.event(organizer=organizer, venue=venue)
        ticket = await seed.ticket(event=event, user=attendee)
        await check_in_use_case.execute(ticket_id=ticket.id, actor=organizer)

        refunded = await refund_ticket_use_case.execute(ticket_id=ticket.id)

        assert refunded.status == TicketStatus.REFUNDED
        assert (await seed.reload_event(event.id)).current_attendee_count == 0
        with pytest.raises(InvalidTransitionError):
            await refund_ticket_use_case.execute(ticket_id=ticket.id)
        assert (await seed.reload_event(event.id)).current_attendee_count == 0
