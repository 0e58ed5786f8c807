from typing import Callable, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Header

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import AuthenticationError
from src.service.inventory.domain.entity.user_entity import UserEntity


ACTOR_HEADER = 'X-User-Id'


@inject
async def get_current_actor(
    x_user_id: Optional[str] = Header(None, alias=ACTOR_HEADER),
    uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
        Provide[Container.unit_of_work.provider]
    ),
) -> UserEntity:
    """
    Resolve the acting user from the `X-User-Id` header.

    Identity is asserted by the caller; the header only has to name an
    existing user.
    """
    if not x_user_id or not x_user_id.strip().isdigit():
        raise AuthenticationError(f'Missing or malformed {ACTOR_HEADER} header')

    user_id = int(x_user_id.strip())
    async with uow_factory() as uow:
        user = await uow.user_repo.get_by_id(user_id=user_id)
    if user is None:
        raise AuthenticationError(f'Unknown user {user_id}')
    return user


@inject
async def get_optional_actor(
    x_user_id: Optional[str] = Header(None, alias=ACTOR_HEADER),
    uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
        Provide[Container.unit_of_work.provider]
    ),
) -> Optional[UserEntity]:
    if x_user_id is None:
        return None
    return await get_current_actor(x_user_id=x_user_id, uow_factory=uow_factory)
