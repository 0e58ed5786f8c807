from fastapi import APIRouter, Depends, Response, status

from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.cancel_event_use_case import CancelEventUseCase
from src.service.inventory.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.inventory.app.command.create_event_use_case import CreateEventUseCase
from src.service.inventory.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.inventory.app.command.publish_event_use_case import PublishEventUseCase
from src.service.inventory.app.command.purchase_ticket_use_case import PurchaseTicketUseCase
from src.service.inventory.app.command.update_event_use_case import UpdateEventUseCase
from src.service.inventory.app.query.get_event_use_case import GetEventUseCase
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.driving_adapter.http_controller.auth.actor_auth import (
    get_current_actor,
)
from src.service.inventory.driving_adapter.http_controller.auth.role_auth import (
    require_organizer_or_admin,
)
from src.service.inventory.driving_adapter.schema.event_schema import (
    EventCancelRequest,
    EventCancelResponse,
    EventCreateRequest,
    EventResponse,
    EventUpdateRequest,
)
from src.service.inventory.driving_adapter.schema.ticket_schema import (
    BulkCheckInRequest,
    BulkPurchaseRequest,
    BulkTicketResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    current_user: UserEntity = Depends(require_organizer_or_admin),
    use_case: CreateEventUseCase = Depends(CreateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.create(actor=current_user, **request.model_dump())
    return EventResponse.from_entity(event)


@router.get('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event(
    event_id: int,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventResponse:
    event = await use_case.get_by_id(event_id=event_id)
    return EventResponse.from_entity(event)


@router.patch('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def update_event(
    event_id: int,
    request: EventUpdateRequest,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: UpdateEventUseCase = Depends(UpdateEventUseCase.depends),
) -> EventResponse:
    event = await use_case.update(
        event_id=event_id, actor=current_user, changes=request.model_dump(exclude_unset=True)
    )
    return EventResponse.from_entity(event)


@router.delete('/{event_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_event(
    event_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: DeleteEventUseCase = Depends(DeleteEventUseCase.depends),
) -> Response:
    await use_case.delete(event_id=event_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================ Lifecycle Endpoints ============================


@router.post('/{event_id}/publish', status_code=status.HTTP_200_OK)
@Logger.io
async def publish_event(
    event_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: PublishEventUseCase = Depends(PublishEventUseCase.depends),
) -> EventResponse:
    event = await use_case.execute(event_id=event_id, actor=current_user)
    return EventResponse.from_entity(event)


@router.post('/{event_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_event(
    event_id: int,
    request: EventCancelRequest | None = None,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: CancelEventUseCase = Depends(CancelEventUseCase.depends),
) -> EventCancelResponse:
    issue_refunds = request.issue_refunds if request else False
    result = await use_case.execute(
        event_id=event_id, actor=current_user, issue_refunds=issue_refunds
    )
    return EventCancelResponse.from_result(result)


# ============================ Bulk Endpoints ============================


@router.post('/{event_id}/bulk-tickets', status_code=status.HTTP_207_MULTI_STATUS)
@Logger.io
async def purchase_bulk(
    event_id: int,
    request: BulkPurchaseRequest,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: PurchaseTicketUseCase = Depends(PurchaseTicketUseCase.depends),
) -> BulkTicketResponse:
    if request.price_override and not current_user.is_admin:
        raise ForbiddenError('Only admins can override the ticket price')

    outcomes = await use_case.purchase_bulk(
        event_id=event_id,
        user_ids=request.user_ids,
        ticket_type=request.ticket_type,
        actor=current_user,
        price=request.price,
        price_override=request.price_override,
    )
    return BulkTicketResponse.from_outcomes(outcomes)


@router.post('/{event_id}/bulk-check-in', status_code=status.HTTP_207_MULTI_STATUS)
@Logger.io
async def check_in_bulk(
    event_id: int,
    request: BulkCheckInRequest,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: CheckInTicketUseCase = Depends(CheckInTicketUseCase.depends),
) -> BulkTicketResponse:
    outcomes = await use_case.execute_bulk(
        event_id=event_id, ticket_ids=request.ticket_ids, actor=current_user
    )
    return BulkTicketResponse.from_outcomes(outcomes)
