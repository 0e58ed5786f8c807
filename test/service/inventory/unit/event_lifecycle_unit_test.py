"""
Unit tests for EventLifecycle

Test Focus:
1. Transition table: allowed and rejected status pairs
2. Publish preconditions, including the scheduling conflict answer
3. Capacity driven published <-> sold_out flips
4. Completion once the end has passed
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.enum.venue_status import VenueStatus
from src.service.inventory.domain.event_lifecycle import EventLifecycle
from src.service.inventory.domain.inventory_errors import (
    CapacityExceededError,
    EventNotPublishedError,
    InvalidTransitionError,
    SchedulingConflictError,
)


NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
START = datetime(2026, 3, 15, 19, 0, tzinfo=timezone.utc)
END = datetime(2026, 3, 15, 22, 0, tzinfo=timezone.utc)


def _event(**overrides) -> EventEntity:
    fields = dict(
        id=1,
        name='Spring Concert',
        organizer_id=2,
        venue_id=1,
        start=START,
        end=END,
        base_price=5000,
        max_attendees=100,
        status=EventStatus.DRAFT,
    )
    fields.update(overrides)
    return EventEntity(**fields)


@pytest.fixture
def venue() -> VenueEntity:
    return VenueEntity(id=1, name='Town Hall', capacity=500)


@pytest.mark.unit
class TestEventTransitions:
    @pytest.mark.parametrize(
        'from_status,to_status',
        [
            (EventStatus.DRAFT, EventStatus.PUBLISHED),
            (EventStatus.DRAFT, EventStatus.CANCELLED),
            (EventStatus.PUBLISHED, EventStatus.SOLD_OUT),
            (EventStatus.PUBLISHED, EventStatus.COMPLETED),
            (EventStatus.SOLD_OUT, EventStatus.PUBLISHED),
            (EventStatus.SOLD_OUT, EventStatus.COMPLETED),
            (EventStatus.SOLD_OUT, EventStatus.CANCELLED),
        ],
    )
    def test_allowed(self, from_status: EventStatus, to_status: EventStatus) -> None:
        assert EventLifecycle.can_transition(from_status, to_status)

    @pytest.mark.parametrize(
        'from_status,to_status',
        [
            (EventStatus.DRAFT, EventStatus.SOLD_OUT),
            (EventStatus.DRAFT, EventStatus.COMPLETED),
            (EventStatus.CANCELLED, EventStatus.PUBLISHED),
            (EventStatus.COMPLETED, EventStatus.CANCELLED),
            (EventStatus.PUBLISHED, EventStatus.DRAFT),
        ],
    )
    def test_rejected(self, from_status: EventStatus, to_status: EventStatus) -> None:
        with pytest.raises(InvalidTransitionError):
            EventLifecycle.transition(_event(status=from_status), to_status)

    def test_cancel_twice_is_invalid(self) -> None:
        cancelled = EventLifecycle.cancel(_event(status=EventStatus.PUBLISHED))

        with pytest.raises(InvalidTransitionError):
            EventLifecycle.cancel(cancelled)


@pytest.mark.unit
class TestPublish:
    def test_publish_complete_draft(self, venue: VenueEntity) -> None:
        published = EventLifecycle.publish(_event(), venue=venue, has_conflict=False, now=NOW)

        assert published.status == EventStatus.PUBLISHED

    def test_reports_every_missing_field(self) -> None:
        draft = _event(venue_id=None, start=None, end=None, base_price=None, max_attendees=None)

        problems = EventLifecycle.publish_problems(draft, None, NOW)

        assert problems == [
            'venue is required',
            'start and end are required',
            'base_price is required',
            'max_attendees is required',
        ]

    def test_start_in_the_past(self, venue: VenueEntity) -> None:
        with pytest.raises(ValidationError, match='start must be in the future'):
            EventLifecycle.publish(
                _event(), venue=venue, has_conflict=False, now=START + timedelta(minutes=1)
            )

    def test_max_attendees_above_venue_capacity(self, venue: VenueEntity) -> None:
        with pytest.raises(ValidationError, match='exceeds venue capacity'):
            EventLifecycle.publish(
                _event(max_attendees=501), venue=venue, has_conflict=False, now=NOW
            )

    def test_closed_venue(self, venue: VenueEntity) -> None:
        closed = VenueEntity(id=1, name='Town Hall', capacity=500, status=VenueStatus.CLOSED)

        with pytest.raises(ValidationError, match='closed'):
            EventLifecycle.publish(_event(), venue=closed, has_conflict=False, now=NOW)

    def test_conflict(self, venue: VenueEntity) -> None:
        with pytest.raises(SchedulingConflictError):
            EventLifecycle.publish(_event(), venue=venue, has_conflict=True, now=NOW)

    def test_only_drafts(self, venue: VenueEntity) -> None:
        with pytest.raises(InvalidTransitionError):
            EventLifecycle.publish(
                _event(status=EventStatus.PUBLISHED), venue=venue, has_conflict=False, now=NOW
            )

    def test_naive_now_is_treated_as_utc(self, venue: VenueEntity) -> None:
        naive_now = datetime(2026, 1, 1, 12, 0)

        published = EventLifecycle.publish(
            _event(), venue=venue, has_conflict=False, now=naive_now
        )

        assert published.status == EventStatus.PUBLISHED


@pytest.mark.unit
class TestCapacityStatus:
    def test_full_published_event_sells_out(self) -> None:
        event = _event(status=EventStatus.PUBLISHED, max_attendees=2, current_attendee_count=2)

        assert EventLifecycle.sync_capacity_status(event).status == EventStatus.SOLD_OUT

    def test_sold_out_reopens_when_a_unit_returns(self) -> None:
        event = _event(status=EventStatus.SOLD_OUT, max_attendees=2, current_attendee_count=1)

        assert EventLifecycle.sync_capacity_status(event).status == EventStatus.PUBLISHED

    def test_cancelled_event_is_left_alone(self) -> None:
        event = _event(status=EventStatus.CANCELLED, max_attendees=2, current_attendee_count=0)

        assert EventLifecycle.sync_capacity_status(event) is event

    def test_sold_out_rejects_sales(self) -> None:
        with pytest.raises(CapacityExceededError):
            EventLifecycle.ensure_can_sell(_event(status=EventStatus.SOLD_OUT), NOW)

    @pytest.mark.parametrize(
        'status', [EventStatus.DRAFT, EventStatus.CANCELLED, EventStatus.COMPLETED]
    )
    def test_not_published_rejects_sales(self, status: EventStatus) -> None:
        with pytest.raises(EventNotPublishedError):
            EventLifecycle.ensure_can_sell(_event(status=status), NOW)

    def test_ended_event_rejects_sales(self) -> None:
        with pytest.raises(EventNotPublishedError):
            EventLifecycle.ensure_can_sell(_event(status=EventStatus.PUBLISHED), END)


@pytest.mark.unit
class TestCompletionAndDeletion:
    def test_should_complete_after_end(self) -> None:
        event = _event(status=EventStatus.SOLD_OUT)

        assert not EventLifecycle.should_complete(event, END - timedelta(seconds=1))
        assert EventLifecycle.should_complete(event, END)

    def test_complete_before_end_is_invalid(self) -> None:
        with pytest.raises(InvalidTransitionError):
            EventLifecycle.complete(_event(status=EventStatus.PUBLISHED), now=NOW)

    def test_draft_is_never_completed(self) -> None:
        assert not EventLifecycle.should_complete(_event(), END + timedelta(days=1))

    def test_only_draft_or_cancelled_without_tickets_can_be_deleted(self) -> None:
        EventLifecycle.ensure_deletable(_event(), ticket_count=0)
        EventLifecycle.ensure_deletable(_event(status=EventStatus.CANCELLED), ticket_count=0)

        with pytest.raises(ConflictError):
            EventLifecycle.ensure_deletable(_event(status=EventStatus.PUBLISHED), ticket_count=0)
        with pytest.raises(ConflictError, match='referenced by 3 tickets'):
            EventLifecycle.ensure_deletable(_event(status=EventStatus.CANCELLED), ticket_count=3)
