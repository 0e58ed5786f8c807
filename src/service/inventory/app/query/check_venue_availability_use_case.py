from datetime import date, datetime
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.venue_availability import VenueAvailabilityResult
from src.service.inventory.domain.value_object.time_window import TimeWindow


class CheckVenueAvailabilityUseCase:
    """
    Lists the windows booked at a venue on a given day and, when a window is
    supplied, answers whether it would conflict.

    `day` defaults to the requested window's start date.
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
    async def execute(
        self,
        *,
        venue_id: int,
        day: Optional[date] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        exclude_event_id: Optional[int] = None,
    ) -> VenueAvailabilityResult:
        if (start is None) != (end is None):
            raise ValidationError('start and end must be given together')
        requested = TimeWindow(start=start, end=end) if start and end else None
        if day is None and requested is None:
            raise ValidationError('Either date or a start/end window is required')
        day = day or requested.start.date()  # type: ignore[union-attr]

        async with self.uow_factory() as uow:
            if await uow.venue_repo.get_by_id(venue_id=venue_id) is None:
                raise NotFoundError(f'Venue {venue_id} not found')

            bookings = await uow.venue_scheduling_guard.list_bookings(
                venue_id=venue_id, window=TimeWindow.for_day(day)
            )
            has_conflict = None
            if requested is not None:
                has_conflict = await uow.venue_scheduling_guard.has_conflict(
                    venue_id=venue_id,
                    start=requested.start,
                    end=requested.end,
                    exclude_event_id=exclude_event_id,
                )

        return VenueAvailabilityResult(
            venue_id=venue_id, date=day, bookings=bookings, has_conflict=has_conflict
        )
