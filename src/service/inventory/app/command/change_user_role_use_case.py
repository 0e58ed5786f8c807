from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole


class ChangeUserRoleUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def change_role(self, *, user_id: int, role: UserRole, actor: UserEntity) -> UserEntity:
        if not actor.is_admin:
            raise ForbiddenError('Only admins can change user roles')

        async with self.uow_factory() as uow:
            user = await uow.user_repo.get_by_id(user_id=user_id)
            if user is None:
                raise NotFoundError(f'User {user_id} not found')
            if user.role == role:
                return user

            updated = await uow.user_repo.update_role(user_id=user_id, role=role)
            await uow.commit()

        Logger.base.info(f'🔑 [CHANGE_ROLE] user={user_id} {user.role.value} -> {role.value}')
        return updated  # type: ignore[return-value]
