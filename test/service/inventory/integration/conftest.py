"""Use cases wired to the per-test SQLite database, frozen clock and lock registry."""

import pytest

from src.service.inventory.app.command.cancel_event_use_case import CancelEventUseCase
from src.service.inventory.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.inventory.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.inventory.app.command.complete_ended_events_use_case import (
    CompleteEndedEventsUseCase,
)
from src.service.inventory.app.command.create_event_use_case import CreateEventUseCase
from src.service.inventory.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.inventory.app.command.delete_venue_use_case import DeleteVenueUseCase
from src.service.inventory.app.command.publish_event_use_case import PublishEventUseCase
from src.service.inventory.app.command.purchase_ticket_use_case import PurchaseTicketUseCase
from src.service.inventory.app.command.refund_ticket_use_case import RefundTicketUseCase
from src.service.inventory.app.command.update_event_use_case import UpdateEventUseCase
from src.service.inventory.app.command.update_venue_status_use_case import (
    UpdateVenueStatusUseCase,
)
from src.service.inventory.app.query.check_venue_availability_use_case import (
    CheckVenueAvailabilityUseCase,
)
from src.service.inventory.app.query.get_event_use_case import GetEventUseCase


@pytest.fixture
def purchase_use_case(uow_factory, lock_registry, clock, settings) -> PurchaseTicketUseCase:
    return PurchaseTicketUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock, settings=settings
    )


@pytest.fixture
def cancel_event_use_case(uow_factory, lock_registry, clock, settings) -> CancelEventUseCase:
    return CancelEventUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock, settings=settings
    )


@pytest.fixture
def cancel_ticket_use_case(uow_factory, lock_registry, clock, settings) -> CancelTicketUseCase:
    return CancelTicketUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock, settings=settings
    )


@pytest.fixture
def refund_ticket_use_case(uow_factory, lock_registry, clock, settings) -> RefundTicketUseCase:
    return RefundTicketUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock, settings=settings
    )


@pytest.fixture
def check_in_use_case(uow_factory, clock, settings) -> CheckInTicketUseCase:
    return CheckInTicketUseCase(uow_factory=uow_factory, clock=clock, settings=settings)


@pytest.fixture
def publish_use_case(uow_factory, lock_registry, clock, settings) -> PublishEventUseCase:
    return PublishEventUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock, settings=settings
    )


@pytest.fixture
def create_event_use_case(uow_factory) -> CreateEventUseCase:
    return CreateEventUseCase(uow_factory=uow_factory)


@pytest.fixture
def update_event_use_case(uow_factory, lock_registry) -> UpdateEventUseCase:
    return UpdateEventUseCase(uow_factory=uow_factory, event_lock_registry=lock_registry)


@pytest.fixture
def delete_event_use_case(uow_factory, lock_registry) -> DeleteEventUseCase:
    return DeleteEventUseCase(uow_factory=uow_factory, event_lock_registry=lock_registry)


@pytest.fixture
def completion_use_case(uow_factory, lock_registry, clock) -> CompleteEndedEventsUseCase:
    return CompleteEndedEventsUseCase(
        uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock
    )


@pytest.fixture
def get_event_use_case(uow_factory, lock_registry, clock) -> GetEventUseCase:
    return GetEventUseCase(uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock)


@pytest.fixture
def delete_venue_use_case(uow_factory, lock_registry, clock) -> DeleteVenueUseCase:
    return DeleteVenueUseCase(uow_factory=uow_factory, event_lock_registry=lock_registry, clock=clock)


@pytest.fixture
def venue_status_use_case(uow_factory, lock_registry) -> UpdateVenueStatusUseCase:
    return UpdateVenueStatusUseCase(uow_factory=uow_factory, event_lock_registry=lock_registry)


@pytest.fixture
def availability_use_case(uow_factory) -> CheckVenueAvailabilityUseCase:
    return CheckVenueAvailabilityUseCase(uow_factory=uow_factory)
