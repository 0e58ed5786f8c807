from fastapi import Depends
from opentelemetry import trace

from src.platform.exception.exceptions import ForbiddenError
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.driving_adapter.http_controller.auth.actor_auth import (
    get_current_actor,
)


class RoleAuthStrategy:
    @staticmethod
    def can_organize(user: UserEntity) -> bool:
        return user.role in (UserRole.ORGANIZER, UserRole.ADMIN)

    @staticmethod
    def is_admin(user: UserEntity) -> bool:
        return user.role == UserRole.ADMIN


async def require_admin(current_user: UserEntity = Depends(get_current_actor)) -> UserEntity:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_admin',
        attributes={
            'user.id': current_user.id or 0,
            'user.role': current_user.role.value,
        },
    ):
        if not RoleAuthStrategy.is_admin(current_user):
            raise ForbiddenError('Only admins can perform this action')
        return current_user


async def require_organizer_or_admin(
    current_user: UserEntity = Depends(get_current_actor),
) -> UserEntity:
    if not RoleAuthStrategy.can_organize(current_user):
        raise ForbiddenError('Only organizers or admins can perform this action')
    return current_user
