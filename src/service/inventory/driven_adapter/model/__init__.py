"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.inventory.driven_adapter.model.event_model import EventModel
from src.service.inventory.driven_adapter.model.ticket_model import TicketModel
from src.service.inventory.driven_adapter.model.user_model import UserModel
from src.service.inventory.driven_adapter.model.venue_model import VenueModel

__all__ = [
    'EventModel',
    'TicketModel',
    'UserModel',
    'VenueModel',
]
