from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.value_object.bulk_item_outcome import BulkItemOutcome


class TicketPurchaseRequest(BaseModel):
    event_id: int
    user_id: Optional[int] = None  # Defaults to the acting user
    ticket_type: str = 'general'
    price: int
    price_override: bool = False  # Admin only: allows price above base_price

    class Config:
        json_schema_extra = {
            'example': {'event_id': 1, 'ticket_type': 'general', 'price': 5000}
        }


class TicketResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': 10,
                'event_id': 1,
                'user_id': 3,
                'price_paid': 5000,
                'ticket_type': 'general',
                'status': 'active',
                'price_override': False,
                'created_at': '2026-03-01T10:30:00Z',
            }
        },
    }

    id: int
    event_id: int
    user_id: int
    price_paid: int
    ticket_type: str
    status: str
    price_override: bool
    created_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: TicketEntity) -> 'TicketResponse':
        return cls(
            id=ticket.id or 0,
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            price_paid=ticket.price_paid,
            ticket_type=ticket.ticket_type,
            status=ticket.status.value,
            price_override=ticket.price_override,
            created_at=ticket.created_at,
            checked_in_at=ticket.checked_in_at,
            cancelled_at=ticket.cancelled_at,
            refunded_at=ticket.refunded_at,
        )


class BulkPurchaseRequest(BaseModel):
    user_ids: List[int] = Field(min_length=1)
    ticket_type: str = 'general'
    price: Optional[int] = None  # Defaults to the event's base_price
    price_override: bool = False

    class Config:
        json_schema_extra = {'example': {'user_ids': [3, 4, 5], 'ticket_type': 'general'}}


class BulkCheckInRequest(BaseModel):
    ticket_ids: List[int] = Field(min_length=1)

    class Config:
        json_schema_extra = {'example': {'ticket_ids': [10, 11, 12]}}


class BulkItemResponse(BaseModel):
    index: int
    status_code: int
    ticket: Optional[TicketResponse] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class BulkTicketResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'succeeded': 1,
                'failed': 1,
                'items': [
                    {'index': 0, 'status_code': 201, 'ticket': {'id': 10, 'status': 'active'}},
                    {
                        'index': 1,
                        'status_code': 409,
                        'error_code': 'CAPACITY_EXCEEDED',
                        'error_message': 'Event 1 is sold out',
                    },
                ],
            }
        },
    }

    succeeded: int
    failed: int
    items: List[BulkItemResponse]

    @classmethod
    def from_outcomes(cls, outcomes: List[BulkItemOutcome[TicketEntity]]) -> 'BulkTicketResponse':
        items = [
            BulkItemResponse(
                index=outcome.index,
                status_code=outcome.status_code,
                ticket=TicketResponse.from_entity(outcome.result) if outcome.result else None,
                error_code=outcome.error_code,
                error_message=outcome.error_message,
            )
            for outcome in outcomes
        ]
        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        return cls(succeeded=succeeded, failed=len(outcomes) - succeeded, items=items)
