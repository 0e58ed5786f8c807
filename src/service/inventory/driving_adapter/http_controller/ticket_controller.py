from fastapi import APIRouter, Depends, status

from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.inventory.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.inventory.app.command.purchase_ticket_use_case import PurchaseTicketUseCase
from src.service.inventory.app.command.refund_ticket_use_case import RefundTicketUseCase
from src.service.inventory.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.inventory.domain.entity.user_entity import UserEntity
from src.service.inventory.driving_adapter.http_controller.auth.actor_auth import (
    get_current_actor,
)
from src.service.inventory.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.inventory.driving_adapter.schema.ticket_schema import (
    TicketPurchaseRequest,
    TicketResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def purchase_ticket(
    request: TicketPurchaseRequest,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: PurchaseTicketUseCase = Depends(PurchaseTicketUseCase.depends),
) -> TicketResponse:
    user_id = request.user_id if request.user_id is not None else current_user.id
    if user_id != current_user.id and not current_user.is_admin:
        raise ForbiddenError('Only admins can purchase tickets for another user')
    if request.price_override and not current_user.is_admin:
        raise ForbiddenError('Only admins can override the ticket price')

    ticket = await use_case.purchase(
        event_id=request.event_id,
        user_id=user_id,  # type: ignore[arg-type]
        ticket_type=request.ticket_type,
        price=request.price,
        price_override=request.price_override,
    )
    return TicketResponse.from_entity(ticket)


@router.get('/{ticket_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.get_by_id(ticket_id=ticket_id, actor=current_user)
    return TicketResponse.from_entity(ticket)


@router.post('/{ticket_id}/check-in', status_code=status.HTTP_200_OK)
@Logger.io
async def check_in_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: CheckInTicketUseCase = Depends(CheckInTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id, actor=current_user)
    return TicketResponse.from_entity(ticket)


@router.post('/{ticket_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_actor),
    use_case: CancelTicketUseCase = Depends(CancelTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id, actor=current_user)
    return TicketResponse.from_entity(ticket)


@router.post('/{ticket_id}/refund', status_code=status.HTTP_200_OK)
@Logger.io
async def refund_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(require_admin),
    use_case: RefundTicketUseCase = Depends(RefundTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id)
    return TicketResponse.from_entity(ticket)
