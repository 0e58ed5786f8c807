"""
Event Repository Implementation (SQLAlchemy, Unit of Work session)

Status writes are conditional on the stored status so a stale in-memory
entity never overwrites a concurrent transition.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_event_repo import IEventRepo
from src.service.inventory.domain.entity.event_entity import EventEntity
from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.driven_adapter.model.event_model import EventModel


class EventRepoImpl(IEventRepo):
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _model_to_entity(model: EventModel) -> EventEntity:
        return EventEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            organizer_id=model.organizer_id,
            venue_id=model.venue_id,
            start=model.start,
            end=model.end,
            base_price=model.base_price,
            max_attendees=model.max_attendees,
            current_attendee_count=model.current_attendee_count,
            status=EventStatus(model.status),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, event_id: int, for_update: bool = False) -> Optional[EventEntity]:
        stmt = select(EventModel).where(EventModel.id == event_id)
        if for_update:
            stmt = stmt.with_for_update()
        # populate_existing: the ledger updates rows with core statements
        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def create(self, *, event: EventEntity) -> EventEntity:
        model = EventModel(
            name=event.name,
            description=event.description,
            organizer_id=event.organizer_id,
            venue_id=event.venue_id,
            start=event.start,
            end=event.end,
            base_price=event.base_price,
            max_attendees=event.max_attendees,
            current_attendee_count=0,
            status=event.status.value,
            version=0,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    @Logger.io
    async def update_details(self, *, event: EventEntity) -> EventEntity:
        result = await self.session.execute(
            update(EventModel)
            .execution_options(synchronize_session=False)
            .where(EventModel.id == event.id)
            .values(
                name=event.name,
                description=event.description,
                venue_id=event.venue_id,
                start=event.start,
                end=event.end,
                base_price=event.base_price,
                max_attendees=event.max_attendees,
                version=EventModel.version + 1,
            )
            .returning(EventModel.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f'Event {event.id} not found')

        assert event.id is not None
        updated = await self.get_by_id(event_id=event.id)
        assert updated is not None
        return updated

    @Logger.io
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> bool:
        result = await self.session.execute(
            update(EventModel)
            .execution_options(synchronize_session=False)
            .where(EventModel.id == event_id, EventModel.status == from_status.value)
            .values(status=to_status.value, version=EventModel.version + 1)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_ended_event_ids(self, *, now: datetime, limit: int = 100) -> List[int]:
        result = await self.session.execute(
            select(EventModel.id)
            .where(
                EventModel.status.in_([EventStatus.PUBLISHED.value, EventStatus.SOLD_OUT.value]),
                EventModel.end.is_not(None),
                EventModel.end <= now,
            )
            .order_by(EventModel.end)
            .limit(limit)
        )
        return list(result.scalars().all())

    @Logger.io
    async def delete(self, *, event_id: int) -> None:
        await self.session.execute(delete(EventModel).where(EventModel.id == event_id))
