from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_user_repo import IUserRepo
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.driven_adapter.model.user_model import UserModel


class UserRepoImpl(IUserRepo):
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _model_to_entity(model: UserModel) -> UserEntity:
        return UserEntity(
            id=model.id,
            email=model.email,
            name=model.name,
            role=UserRole(model.role),
            created_at=model.created_at,
        )

    @Logger.io
    async def create(self, *, user: UserEntity) -> UserEntity:
        model = UserModel(email=user.email, name=user.name, role=user.role.value)
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Email {user.email} is already registered') from e
        await self.session.refresh(model)
        return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, user_id: int) -> Optional[UserEntity]:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_email(self, *, email: str) -> Optional[UserEntity]:
        result = await self.session.execute(select(UserModel).where(UserModel.email == email))
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def update_role(self, *, user_id: int, role: UserRole) -> Optional[UserEntity]:
        await self.session.execute(
            update(UserModel)
            .execution_options(synchronize_session=False)
            .where(UserModel.id == user_id)
            .values(role=role.value)
        )
        result = await self.session.execute(
            select(UserModel)
            .where(UserModel.id == user_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def count(self) -> int:
        result = await self.session.execute(select(func.count(UserModel.id)))
        return int(result.scalar_one())
