"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.inventory.app.command import (
    cancel_event_use_case,
    cancel_ticket_use_case,
    change_user_role_use_case,
    check_in_ticket_use_case,
    complete_ended_events_use_case,
    create_event_use_case,
    create_user_use_case,
    create_venue_use_case,
    delete_event_use_case,
    delete_venue_use_case,
    publish_event_use_case,
    purchase_ticket_use_case,
    refund_ticket_use_case,
    update_event_use_case,
    update_venue_status_use_case,
)
from src.service.inventory.app.query import (
    check_venue_availability_use_case,
    get_event_use_case,
    get_ticket_use_case,
    get_user_use_case,
    get_venue_use_case,
)
from src.service.inventory.driving_adapter.http_controller.auth import actor_auth


WIRE_MODULES: list[ModuleType] = [
    # Events
    create_event_use_case,
    update_event_use_case,
    delete_event_use_case,
    publish_event_use_case,
    cancel_event_use_case,
    complete_ended_events_use_case,
    get_event_use_case,
    # Tickets
    purchase_ticket_use_case,
    cancel_ticket_use_case,
    refund_ticket_use_case,
    check_in_ticket_use_case,
    get_ticket_use_case,
    # Venues
    create_venue_use_case,
    update_venue_status_use_case,
    delete_venue_use_case,
    get_venue_use_case,
    check_venue_availability_use_case,
    # Users
    create_user_use_case,
    change_user_role_use_case,
    get_user_use_case,
    actor_auth,
]
