from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.inventory_errors import PriceExceedsBaseError
from src.service.inventory.domain.value_object.time_window import optional_utc


@attrs.define
class TicketEntity:
    event_id: int
    user_id: int
    price_paid: int
    ticket_type: str = 'general'
    status: TicketStatus = TicketStatus.ACTIVE
    price_override: bool = False
    capacity_released: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    checked_in_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    cancelled_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)
    refunded_at: Optional[datetime] = attrs.field(default=None, converter=optional_utc)

    @property
    def holds_capacity(self) -> bool:
        return self.status in (TicketStatus.ACTIVE, TicketStatus.CHECKED_IN) and (
            not self.capacity_released
        )

    @classmethod
    def issue(
        cls,
        *,
        event: EventEntity,
        user_id: int,
        ticket_type: str,
        price_paid: int,
        price_override: bool,
        now: datetime,
    ) -> 'TicketEntity':
        if price_paid < 0:
            raise ValidationError('price_paid cannot be negative')
        if not ticket_type or not ticket_type.strip():
            raise ValidationError('ticket_type cannot be empty')
        if event.base_price is not None and price_paid > event.base_price and not price_override:
            raise PriceExceedsBaseError(
                f'price_paid {price_paid} exceeds base price {event.base_price} of event {event.id}'
            )

        assert event.id is not None
        return cls(
            event_id=event.id,
            user_id=user_id,
            price_paid=price_paid,
            ticket_type=ticket_type,
            price_override=price_override,
            created_at=now,
        )
