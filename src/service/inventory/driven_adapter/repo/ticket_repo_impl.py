from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
from src.service.inventory.domain.entity.ticket_entity import TicketEntity
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.driven_adapter.model.ticket_model import TicketModel


_STATUS_TIMESTAMP_COLUMN = {
    TicketStatus.CHECKED_IN: 'checked_in_at',
    TicketStatus.CANCELLED: 'cancelled_at',
    TicketStatus.REFUNDED: 'refunded_at',
}


class TicketRepoImpl(ITicketRepo):
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _model_to_entity(model: TicketModel) -> TicketEntity:
        return TicketEntity(
            id=model.id,
            event_id=model.event_id,
            user_id=model.user_id,
            price_paid=model.price_paid,
            ticket_type=model.ticket_type,
            status=TicketStatus(model.status),
            price_override=model.price_override,
            capacity_released=model.capacity_released,
            created_at=model.created_at,
            checked_in_at=model.checked_in_at,
            cancelled_at=model.cancelled_at,
            refunded_at=model.refunded_at,
        )

    @Logger.io
    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        model = TicketModel(
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            price_paid=ticket.price_paid,
            ticket_type=ticket.ticket_type,
            status=ticket.status.value,
            price_override=ticket.price_override,
            capacity_released=False,
        )
        if ticket.created_at is not None:
            model.created_at = ticket.created_at
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, ticket_id: int, for_update: bool = False) -> Optional[TicketEntity]:
        stmt = select(TicketModel).where(TicketModel.id == ticket_id)
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_by_event(
        self, *, event_id: int, statuses: Optional[Iterable[TicketStatus]] = None
    ) -> List[TicketEntity]:
        stmt = select(TicketModel).where(TicketModel.event_id == event_id)
        if statuses is not None:
            stmt = stmt.where(TicketModel.status.in_([s.value for s in statuses]))
        result = await self.session.execute(
            stmt.order_by(TicketModel.id).execution_options(populate_existing=True)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def count_by_event(
        self, *, event_id: int, statuses: Optional[Iterable[TicketStatus]] = None
    ) -> int:
        stmt = select(func.count(TicketModel.id)).where(TicketModel.event_id == event_id)
        if statuses is not None:
            stmt = stmt.where(TicketModel.status.in_([s.value for s in statuses]))
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    @Logger.io
    async def update_status(self, *, ticket: TicketEntity, from_status: TicketStatus) -> bool:
        values: Dict[str, Any] = {'status': ticket.status.value}
        if column := _STATUS_TIMESTAMP_COLUMN.get(ticket.status):
            values[column] = getattr(ticket, column)
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(TicketModel.id == ticket.id, TicketModel.status == from_status.value)
            .values(**values)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def bulk_update_status(
        self,
        *,
        event_id: int,
        from_statuses: Iterable[TicketStatus],
        to_status: TicketStatus,
        now: datetime,
    ) -> int:
        values: Dict[str, Any] = {'status': to_status.value}
        if column := _STATUS_TIMESTAMP_COLUMN.get(to_status):
            values[column] = now
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketModel.event_id == event_id,
                TicketModel.status.in_([s.value for s in from_statuses]),
            )
            .values(**values)
        )
        return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def mark_capacity_released(self, *, ticket_id: int) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(TicketModel.id == ticket_id, TicketModel.capacity_released.is_(False))
            .values(capacity_released=True)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def bulk_mark_capacity_released(
        self, *, event_id: int, statuses: Iterable[TicketStatus]
    ) -> int:
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketModel.event_id == event_id,
                TicketModel.status.in_([s.value for s in statuses]),
                TicketModel.capacity_released.is_(False),
            )
            .values(capacity_released=True)
        )
        return result.rowcount  # type: ignore[attr-defined]
