"""
Capacity Ledger (SQLAlchemy)

Every counter change is a single conditional UPDATE, so the database
evaluates the capacity check and the increment as one step:

    UPDATE event
       SET current_attendee_count = current_attendee_count + :n
     WHERE id = :event_id AND current_attendee_count + :n <= max_attendees

Zero affected rows means the units did not fit (or the event is gone).
The increment lives in the caller's Unit of Work transaction: rolling the
transaction back discards a pending reservation.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.reservation_token import ReservationState, ReservationToken
from src.service.inventory.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.inventory.domain.inventory_errors import CapacityExceededError
from src.service.inventory.driven_adapter.model.event_model import EventModel


class CapacityLedgerImpl(ICapacityLedger):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load_counter(self, *, event_id: int) -> tuple[int, int | None]:
        result = await self.session.execute(
            select(EventModel.current_attendee_count, EventModel.max_attendees).where(
                EventModel.id == event_id
            )
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(f'Event {event_id} not found')
        return row[0], row[1]

    @Logger.io
    async def reserve(self, *, event_id: int, count: int = 1) -> ReservationToken:
        if count <= 0:
            raise ValidationError(f'Reservation count must be positive, got {count}')

        result = await self.session.execute(
            update(EventModel)
            .execution_options(synchronize_session=False)
            .where(
                EventModel.id == event_id,
                EventModel.max_attendees.is_not(None),
                EventModel.current_attendee_count + count <= EventModel.max_attendees,
            )
            .values(
                current_attendee_count=EventModel.current_attendee_count + count,
                version=EventModel.version + 1,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            current, maximum = await self._load_counter(event_id=event_id)
            raise CapacityExceededError(
                f'Event {event_id} has {max((maximum or 0) - current, 0)} of {maximum or 0} '
                f'seats left, {count} requested'
            )

        token = ReservationToken(event_id=event_id, count=count)
        Logger.base.debug(f'🎟️ [LEDGER] reserved event={event_id} count={count} token={token.id}')
        return token

    def commit(self, token: ReservationToken) -> None:
        if token.state != ReservationState.PENDING:
            Logger.base.warning(
                f'⚠️ [LEDGER] commit ignored for token={token.id} in state {token.state.value}'
            )
            return
        token.state = ReservationState.COMMITTED

    @Logger.io
    async def release(self, token: ReservationToken) -> bool:
        if token.state != ReservationState.COMMITTED:
            # Pending increments vanish with their rolled back transaction
            Logger.base.debug(
                f'[LEDGER] release no-op for token={token.id} in state {token.state.value}'
            )
            return False

        result = await self.session.execute(
            update(EventModel)
            .execution_options(synchronize_session=False)
            .where(
                EventModel.id == token.event_id,
                EventModel.current_attendee_count >= token.count,
            )
            .values(
                current_attendee_count=EventModel.current_attendee_count - token.count,
                version=EventModel.version + 1,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            current, _ = await self._load_counter(event_id=token.event_id)
            Logger.base.error(
                f'❌ [LEDGER] release of {token.count} would underflow event={token.event_id} '
                f'(current={current})'
            )
            raise ConflictError(
                f'Event {token.event_id} holds {current} units, cannot release {token.count}'
            )

        token.state = ReservationState.RELEASED
        Logger.base.debug(
            f'[LEDGER] released event={token.event_id} count={token.count} token={token.id}'
        )
        return True

    @Logger.io
    async def committed_count(self, *, event_id: int) -> int:
        current, _ = await self._load_counter(event_id=event_id)
        return current
