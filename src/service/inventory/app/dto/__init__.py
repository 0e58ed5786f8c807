from src.service.inventory.app.dto.event_cancellation_result import EventCancellationResult
from src.service.inventory.app.dto.reservation_token import ReservationState, ReservationToken
from src.service.inventory.app.dto.venue_availability import (
    VenueAvailabilityResult,
    VenueBooking,
)

__all__ = [
    'EventCancellationResult',
    'ReservationState',
    'ReservationToken',
    'VenueAvailabilityResult',
    'VenueBooking',
]
