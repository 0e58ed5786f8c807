"""Application layer interfaces (Ports)"""

from src.service.inventory.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.inventory.app.interface.i_event_repo import IEventRepo
from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
from src.service.inventory.app.interface.i_user_repo import IUserRepo
from src.service.inventory.app.interface.i_venue_repo import IVenueRepo
from src.service.inventory.app.interface.i_venue_scheduling_guard import IVenueSchedulingGuard

__all__ = [
    'ICapacityLedger',
    'IEventRepo',
    'ITicketRepo',
    'IUserRepo',
    'IVenueRepo',
    'IVenueSchedulingGuard',
]
