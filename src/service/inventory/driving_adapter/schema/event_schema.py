from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.inventory.app.dto.event_cancellation_result import EventCancellationResult
from src.service.inventory.domain.entity.event_entity import EventEntity


class EventCreateRequest(BaseModel):
    """A draft only needs a name; everything else can be filled in before publishing."""

    name: str
    description: str = ''
    venue_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    base_price: Optional[int] = None
    max_attendees: Optional[int] = None
    organizer_id: Optional[int] = None  # Admins may create on behalf of an organizer

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Spring Concert',
                'description': 'An evening of chamber music',
                'venue_id': 1,
                'start': '2026-03-15T19:00:00Z',
                'end': '2026-03-15T22:00:00Z',
                'base_price': 5000,
                'max_attendees': 100,
            }
        }


class EventUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    venue_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    base_price: Optional[int] = None
    max_attendees: Optional[int] = None

    class Config:
        json_schema_extra = {'example': {'max_attendees': 80, 'base_price': 4500}}


class EventCancelRequest(BaseModel):
    issue_refunds: bool = False

    class Config:
        json_schema_extra = {'example': {'issue_refunds': True}}


class EventResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 1,
                'name': 'Spring Concert',
                'description': 'An evening of chamber music',
                'organizer_id': 2,
                'venue_id': 1,
                'start': '2026-03-15T19:00:00Z',
                'end': '2026-03-15T22:00:00Z',
                'base_price': 5000,
                'max_attendees': 100,
                'current_attendee_count': 42,
                'remaining_capacity': 58,
                'status': 'published',
                'version': 43,
            }
        },
    }

    id: int
    name: str
    description: str
    organizer_id: int
    venue_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    base_price: Optional[int] = None
    max_attendees: Optional[int] = None
    current_attendee_count: int
    remaining_capacity: int
    status: str
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, event: EventEntity) -> 'EventResponse':
        return cls(
            id=event.id or 0,
            name=event.name,
            description=event.description,
            organizer_id=event.organizer_id,
            venue_id=event.venue_id,
            start=event.start,
            end=event.end,
            base_price=event.base_price,
            max_attendees=event.max_attendees,
            current_attendee_count=event.current_attendee_count,
            remaining_capacity=event.remaining_capacity,
            status=event.status.value,
            version=event.version,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class EventCancelResponse(BaseModel):
    event: EventResponse
    affected_tickets: int
    refunded: bool

    @classmethod
    def from_result(cls, result: EventCancellationResult) -> 'EventCancelResponse':
        return cls(
            event=EventResponse.from_entity(result.event),
            affected_tickets=result.affected_tickets,
            refunded=result.refunded,
        )
