import attrs

from src.service.inventory.domain.entity.event_entity import EventEntity


@attrs.define(frozen=True)
class EventCancellationResult:
    event: EventEntity
    affected_tickets: int
    refunded: bool
