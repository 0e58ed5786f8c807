from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.create_venue_use_case import CreateVenueUseCase
from src.service.inventory.app.command.delete_venue_use_case import DeleteVenueUseCase
from src.service.inventory.app.command.update_venue_status_use_case import (
    UpdateVenueStatusUseCase,
)
from src.service.inventory.app.query.check_venue_availability_use_case import (
    CheckVenueAvailabilityUseCase,
)
from src.service.inventory.app.query.get_venue_use_case import GetVenueUseCase
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.domain.enum.venue_status import VenueStatus
from src.service.inventory.driving_adapter.http_controller.auth.role_auth import (
    require_organizer_or_admin,
)
from src.service.inventory.driving_adapter.schema.venue_schema import (
    VenueAvailabilityResponse,
    VenueCreateRequest,
    VenueResponse,
    VenueStatusUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_venue(
    request: VenueCreateRequest,
    current_user: UserEntity = Depends(require_organizer_or_admin),
    use_case: CreateVenueUseCase = Depends(CreateVenueUseCase.depends),
) -> VenueResponse:
    venue = await use_case.create(name=request.name, capacity=request.capacity, actor=current_user)
    return VenueResponse.from_entity(venue)


@router.get('/{venue_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_venue(
    venue_id: int,
    use_case: GetVenueUseCase = Depends(GetVenueUseCase.depends),
) -> VenueResponse:
    venue = await use_case.get_by_id(venue_id=venue_id)
    return VenueResponse.from_entity(venue)


@router.patch('/{venue_id}/status', status_code=status.HTTP_200_OK)
@Logger.io
async def update_venue_status(
    venue_id: int,
    request: VenueStatusUpdateRequest,
    current_user: UserEntity = Depends(require_organizer_or_admin),
    use_case: UpdateVenueStatusUseCase = Depends(UpdateVenueStatusUseCase.depends),
) -> VenueResponse:
    venue = await use_case.update_status(
        venue_id=venue_id, status=VenueStatus(request.status), actor=current_user
    )
    return VenueResponse.from_entity(venue)


@router.delete('/{venue_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_venue(
    venue_id: int,
    current_user: UserEntity = Depends(require_organizer_or_admin),
    use_case: DeleteVenueUseCase = Depends(DeleteVenueUseCase.depends),
) -> Response:
    await use_case.delete(venue_id=venue_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get('/{venue_id}/availability', status_code=status.HTTP_200_OK)
@Logger.io
async def check_venue_availability(
    venue_id: int,
    date: Optional[date] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    exclude_event_id: Optional[int] = None,
    use_case: CheckVenueAvailabilityUseCase = Depends(CheckVenueAvailabilityUseCase.depends),
) -> VenueAvailabilityResponse:
    """Booked windows on `date`, and whether `start`/`end` would conflict."""
    result = await use_case.execute(
        venue_id=venue_id,
        day=date,
        start=start,
        end=end,
        exclude_event_id=exclude_event_id,
    )
    return VenueAvailabilityResponse.from_result(result)
