import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel

from src.service.inventory.app.dto.venue_availability import VenueAvailabilityResult
from src.service.inventory.domain.entity.venue_entity import VenueEntity


class VenueCreateRequest(BaseModel):
    name: str
    capacity: int

    class Config:
        json_schema_extra = {'example': {'name': 'Town Hall', 'capacity': 500}}


class VenueStatusUpdateRequest(BaseModel):
    status: Literal['active', 'closed']

    class Config:
        json_schema_extra = {'example': {'status': 'closed'}}


class VenueResponse(BaseModel):
    id: int
    name: str
    capacity: int
    status: str
    created_at: Optional[dt.datetime] = None

    class Config:
        json_schema_extra = {
            'example': {'id': 1, 'name': 'Town Hall', 'capacity': 500, 'status': 'active'}
        }

    @classmethod
    def from_entity(cls, venue: VenueEntity) -> 'VenueResponse':
        return cls(
            id=venue.id or 0,
            name=venue.name,
            capacity=venue.capacity,
            status=venue.status.value,
            created_at=venue.created_at,
        )


class VenueBookingResponse(BaseModel):
    event_id: int
    name: str
    start: dt.datetime
    end: dt.datetime
    status: str


class VenueAvailabilityResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'venue_id': 1,
                'date': '2026-03-15',
                'bookings': [
                    {
                        'event_id': 1,
                        'name': 'Spring Concert',
                        'start': '2026-03-15T19:00:00Z',
                        'end': '2026-03-15T22:00:00Z',
                        'status': 'published',
                    }
                ],
                'has_conflict': True,
            }
        },
    }

    venue_id: int
    date: Optional[dt.date] = None
    bookings: List[VenueBookingResponse]
    has_conflict: Optional[bool] = None

    @classmethod
    def from_result(cls, result: VenueAvailabilityResult) -> 'VenueAvailabilityResponse':
        return cls(
            venue_id=result.venue_id,
            date=result.date,
            bookings=[
                VenueBookingResponse(
                    event_id=booking.event_id,
                    name=booking.name,
                    start=booking.start,
                    end=booking.end,
                    status=booking.status.value,
                )
                for booking in result.bookings
            ],
            has_conflict=result.has_conflict,
        )
