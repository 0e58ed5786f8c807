from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ForbiddenError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole


class CreateUserUseCase:
    """
    Registers a user.

    Anyone may register as an attendee. Organizer and admin accounts need an
    admin actor, except for the very first user, which bootstraps the system.
    """

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
    async def create_user(
        self,
        *,
        email: str,
        name: str = '',
        role: UserRole = UserRole.ATTENDEE,
        actor: Optional[UserEntity] = None,
    ) -> UserEntity:
        email = email.strip().lower()
        if not email or '@' not in email:
            raise ValidationError(f'Invalid email: {email!r}')

        async with self.uow_factory() as uow:
            if await uow.user_repo.get_by_email(email=email) is not None:
                raise ConflictError(f'Email {email} is already registered')

            if role != UserRole.ATTENDEE and not (actor and actor.is_admin):
                if await uow.user_repo.count() > 0:
                    raise ForbiddenError(f'Only admins can create {role.value} accounts')
                Logger.base.info(f'🔑 [CREATE_USER] bootstrapping first user as {role.value}')

            user = await uow.user_repo.create(user=UserEntity(email=email, name=name, role=role))
            await uow.commit()

        Logger.base.info(f'👤 [CREATE_USER] user={user.id} role={user.role.value}')
        return user
