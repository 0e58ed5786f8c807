"""
Unit tests for PurchaseTicketUseCase

Collaborators are AsyncMocks; the database-backed behaviour (conditional
UPDATE, sold_out flip) is covered by the integration tests.

Test Focus:
1. Happy path order: lock -> reserve -> insert -> commit -> token committed
2. Failures before the reservation never touch the ledger
3. A failed insert leaves the token pending (rolled back with the transaction)
4. Bulk authorization and price defaulting
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import ForbiddenError, NotFoundError, ValidationError
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.app.command.purchase_ticket_use_case import PurchaseTicketUseCase
from src.service.inventory.app.dto.reservation_token import ReservationState, ReservationToken
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.inventory_errors import (
    CapacityExceededError,
    EventNotPublishedError,
    PriceExceedsBaseError,
)


NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _event(**overrides) -> EventEntity:
    fields = dict(
        id=1,
        name='Spring Concert',
        organizer_id=2,
        venue_id=1,
        start=datetime(2026, 3, 15, 19, 0, tzinfo=timezone.utc),
        end=datetime(2026, 3, 15, 22, 0, tzinfo=timezone.utc),
        base_price=5000,
        max_attendees=100,
        current_attendee_count=10,
        status=EventStatus.PUBLISHED,
    )
    fields.update(overrides)
    return EventEntity(**fields)


@pytest.fixture
def use_case(mock_uow_factory) -> PurchaseTicketUseCase:
    return PurchaseTicketUseCase(
        uow_factory=mock_uow_factory,
        event_lock_registry=EventLockRegistry(timeout_seconds=1.0),
        clock=lambda: NOW,
        settings=Settings(CAPACITY_RETRY_BACKOFF_SECONDS=0),
    )


@pytest.fixture
def on_sale(mock_uow: MagicMock) -> ReservationToken:
    """Event 1 on sale, user 3 exists; returns the token the ledger hands out."""
    token = ReservationToken(event_id=1, count=1)
    mock_uow.event_repo.get_by_id.return_value = _event()
    mock_uow.user_repo.get_by_id.return_value = UserEntity(id=3, email='a@example.com')
    mock_uow.capacity_ledger.reserve.return_value = token

    async def create(*, ticket: TicketEntity) -> TicketEntity:
        ticket.id = 99
        return ticket

    mock_uow.ticket_repo.create.side_effect = create
    return token


@pytest.mark.unit
class TestPurchase:
    async def test_purchase_success(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        ticket = await use_case.purchase(
            event_id=1, user_id=3, ticket_type='general', price=5000
        )

        assert ticket.id == 99
        assert ticket.price_paid == 5000
        mock_uow.capacity_ledger.reserve.assert_awaited_once_with(event_id=1, count=1)
        mock_uow.commit.assert_awaited_once()
        mock_uow.capacity_ledger.commit.assert_called_once_with(on_sale)

    async def test_event_not_found(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock
    ) -> None:
        mock_uow.event_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.purchase(event_id=1, user_id=3, ticket_type='general', price=0)

        mock_uow.capacity_ledger.reserve.assert_not_awaited()

    async def test_draft_event_is_not_on_sale(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        mock_uow.event_repo.get_by_id.return_value = _event(status=EventStatus.DRAFT)

        with pytest.raises(EventNotPublishedError):
            await use_case.purchase(event_id=1, user_id=3, ticket_type='general', price=5000)

        mock_uow.capacity_ledger.reserve.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_price_above_base_rejected_before_reserve(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        with pytest.raises(PriceExceedsBaseError):
            await use_case.purchase(event_id=1, user_id=3, ticket_type='general', price=5001)

        mock_uow.capacity_ledger.reserve.assert_not_awaited()

    async def test_capacity_exceeded_propagates(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        mock_uow.capacity_ledger.reserve.side_effect = CapacityExceededError('full')

        with pytest.raises(CapacityExceededError):
            await use_case.purchase(event_id=1, user_id=3, ticket_type='general', price=5000)

        mock_uow.ticket_repo.create.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_failed_insert_leaves_token_pending(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        mock_uow.ticket_repo.create.side_effect = NotFoundError('User 3 not found')

        with pytest.raises(NotFoundError):
            await use_case.purchase(event_id=1, user_id=3, ticket_type='general', price=5000)

        assert on_sale.state == ReservationState.PENDING
        mock_uow.commit.assert_not_awaited()
        mock_uow.capacity_ledger.commit.assert_not_called()


@pytest.mark.unit
class TestPurchaseBulk:
    async def test_attendee_cannot_bulk_purchase(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        attendee = UserEntity(id=3, email='a@example.com')

        with pytest.raises(ForbiddenError):
            await use_case.purchase_bulk(
                event_id=1, user_ids=[3], ticket_type='general', actor=attendee
            )

        mock_uow.capacity_ledger.reserve.assert_not_awaited()

    async def test_empty_batch(self, use_case: PurchaseTicketUseCase) -> None:
        admin = UserEntity(id=1, email='root@example.com', role=UserRole.ADMIN)

        with pytest.raises(ValidationError):
            await use_case.purchase_bulk(
                event_id=1, user_ids=[], ticket_type='general', actor=admin
            )

    async def test_price_defaults_to_base_and_order_is_kept(
        self, use_case: PurchaseTicketUseCase, mock_uow: MagicMock, on_sale: ReservationToken
    ) -> None:
        organizer = UserEntity(id=2, email='org@example.com', role=UserRole.ORGANIZER)
        mock_uow.capacity_ledger.reserve.side_effect = [
            ReservationToken(event_id=1, count=1),
            CapacityExceededError('Event 1 is sold out'),
        ]

        outcomes = await use_case.purchase_bulk(
            event_id=1, user_ids=[3, 4], ticket_type='general', actor=organizer
        )

        assert [outcome.index for outcome in outcomes] == [0, 1]
        assert sum(1 for outcome in outcomes if outcome.succeeded) == 1
        failed = next(outcome for outcome in outcomes if not outcome.succeeded)
        assert failed.error_code == 'CAPACITY_EXCEEDED'
        assert failed.status_code == 409
        succeeded = next(outcome for outcome in outcomes if outcome.succeeded)
        assert succeeded.result.price_paid == 5000
