from enum import Enum


class UserRole(str, Enum):
    ATTENDEE = 'attendee'
    ORGANIZER = 'organizer'
    ADMIN = 'admin'
