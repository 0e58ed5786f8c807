"""Inventory Domain Enums"""

from src.service.inventory.domain.enum.event_status import EventStatus
from src.service.inventory.domain.enum.ticket_status import TicketStatus
from src.service.inventory.domain.enum.user_role import UserRole
from src.service.inventory.domain.enum.venue_status import VenueStatus

__all__ = ['EventStatus', 'TicketStatus', 'UserRole', 'VenueStatus']
