from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.change_user_role_use_case import ChangeUserRoleUseCase
from src.service.inventory.app.command.create_user_use_case import CreateUserUseCase
from src.service.inventory.app.query.get_user_use_case import GetUserUseCase
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.driving_adapter.http_controller.auth.actor_auth import (
    get_current_actor,
    get_optional_actor,
)
from src.service.inventory.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.inventory.driving_adapter.schema.user_schema import (
    ChangeRoleRequest,
    CreateUserRequest,
    UserResponse,
)


router = APIRouter()


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_user(
    request: CreateUserRequest,
    current_user: Optional[UserEntity] = Depends(get_optional_actor),
    use_case: CreateUserUseCase = Depends(CreateUserUseCase.depends),
) -> UserResponse:
    user = await use_case.create_user(
        email=request.email, name=request.name, role=request.role, actor=current_user
    )
    return UserResponse.from_entity(user)


@router.get('/{user_id}', response_model=UserResponse)
@Logger.io
async def get_user(
    user_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: GetUserUseCase = Depends(GetUserUseCase.depends),
) -> UserResponse:
    user = await use_case.get_by_id(user_id=user_id)
    return UserResponse.from_entity(user)


@router.patch('/{user_id}/role', response_model=UserResponse)
@Logger.io
async def change_user_role(
    user_id: int,
    request: ChangeRoleRequest,
    current_user: UserEntity = Depends(require_admin),
    use_case: ChangeUserRoleUseCase = Depends(ChangeUserRoleUseCase.depends),
) -> UserResponse:
    user = await use_case.change_role(user_id=user_id, role=request.role, actor=current_user)
    return UserResponse.from_entity(user)
