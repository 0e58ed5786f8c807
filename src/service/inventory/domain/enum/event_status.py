from enum import Enum


class EventStatus(Enum):
    DRAFT = 'draft'
    PUBLISHED = 'published'
    SOLD_OUT = 'sold_out'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'
