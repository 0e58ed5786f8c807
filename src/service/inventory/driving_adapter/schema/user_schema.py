from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole


class CreateUserRequest(BaseModel):
    email: str
    name: str = ''
    role: UserRole = UserRole.ATTENDEE

    class Config:
        json_schema_extra = {
            'example': {'email': 'ada@example.com', 'name': 'Ada', 'role': 'attendee'}
        }


class ChangeRoleRequest(BaseModel):
    role: UserRole

    class Config:
        json_schema_extra = {'example': {'role': 'organizer'}}


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            'example': {'id': 1, 'email': 'ada@example.com', 'name': 'Ada', 'role': 'organizer'}
        }

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserResponse':
        return cls(
            id=user.id or 0,
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
        )
