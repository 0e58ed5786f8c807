from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.inventory.domain.enum.venue_status import VenueStatus


def _validate_capacity(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise ValidationError('Venue capacity must be a positive integer')


@attrs.define
class VenueEntity:
    name: str
    capacity: int = attrs.field(validator=_validate_capacity)
    status: VenueStatus = VenueStatus.ACTIVE
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == VenueStatus.ACTIVE
