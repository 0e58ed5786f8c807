from datetime import datetime
from typing import Optional

import attrs

from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.enum.user_role import UserRole


@attrs.define
class UserEntity:
    email: str
    name: str = ''
    role: UserRole = UserRole.ATTENDEE
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_manage_event(self, event: EventEntity) -> bool:
        return self.is_admin or (self.role == UserRole.ORGANIZER and event.organizer_id == self.id)

