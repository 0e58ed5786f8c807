from abc import ABC, abstractmethod
from typing import Optional

from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.user_role import UserRole


class IUserRepo(ABC):
    """User Repository Abstract Interface"""

    @abstractmethod
    async def create(self, *, user: UserEntity) -> UserEntity:
        """Raises ConflictError when the email is already registered."""
        pass

    @abstractmethod
    async def get_by_id(self, *, user_id: int) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def update_role(self, *, user_id: int, role: UserRole) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
