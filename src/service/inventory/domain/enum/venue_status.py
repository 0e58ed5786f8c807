from enum import Enum


class VenueStatus(Enum):
    ACTIVE = 'active'
    CLOSED = 'closed'  # Keeps its history but cannot host newly published events
