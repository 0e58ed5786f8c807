from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.user_role import UserRole


class CreateVenueUseCase:
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
    async def create(self, *, name: str, capacity: int, actor: UserEntity) -> VenueEntity:
        if actor.role not in (UserRole.ORGANIZER, UserRole.ADMIN):
            raise ForbiddenError('Only organizers or admins can manage venues')
        if not name.strip():
            raise ValidationError('Venue name cannot be empty')

        venue = VenueEntity(name=name.strip(), capacity=capacity)
        async with self.uow_factory() as uow:
            created = await uow.venue_repo.create(venue=venue)
            await uow.commit()

        Logger.base.info(f'🏟️ [CREATE_VENUE] venue={created.id} capacity={created.capacity}')
        return created
