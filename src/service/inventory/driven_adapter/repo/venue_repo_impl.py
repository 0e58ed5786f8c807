from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_venue_repo import IVenueRepo
from src.service.inventory.domain.entity.venue_entity import VenueEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.enum.venue_status import VenueStatus
from src.service.inventory.driven_adapter.model.event_model import EventModel
from src.service.inventory.driven_adapter.model.venue_model import VenueModel


class VenueRepoImpl(IVenueRepo):
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _model_to_entity(model: VenueModel) -> VenueEntity:
        return VenueEntity(
            id=model.id,
            name=model.name,
            capacity=model.capacity,
            status=VenueStatus(model.status),
            created_at=model.created_at,
        )

    @Logger.io
    async def create(self, *, venue: VenueEntity) -> VenueEntity:
        model = VenueModel(name=venue.name, capacity=venue.capacity, status=venue.status.value)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, venue_id: int) -> Optional[VenueEntity]:
        result = await self.session.execute(
            select(VenueModel)
            .where(VenueModel.id == venue_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def update_status(self, *, venue_id: int, status: VenueStatus) -> Optional[VenueEntity]:
        await self.session.execute(
            update(VenueModel)
            .execution_options(synchronize_session=False)
            .where(VenueModel.id == venue_id)
            .values(status=status.value)
        )
        return await self.get_by_id(venue_id=venue_id)

    @Logger.io
    async def count_upcoming_events(self, *, venue_id: int, now: datetime) -> int:
        result = await self.session.execute(
            select(func.count(EventModel.id)).where(
                EventModel.venue_id == venue_id,
                EventModel.start > now,
                EventModel.status.not_in(
                    [EventStatus.CANCELLED.value, EventStatus.COMPLETED.value]
                ),
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def count_events(self, *, venue_id: int) -> int:
        result = await self.session.execute(
            select(func.count(EventModel.id)).where(EventModel.venue_id == venue_id)
        )
        return int(result.scalar_one())

    @Logger.io
    async def delete(self, *, venue_id: int) -> None:
        await self.session.execute(delete(VenueModel).where(VenueModel.id == venue_id))
