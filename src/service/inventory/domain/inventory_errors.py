"""
Inventory domain errors

Each error carries the HTTP status it maps to and a stable `code` that bulk
operations report per item.
"""

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    DomainError,
    ValidationError,
)


class SchedulingConflictError(CustomBaseError):
    code = 'SCHEDULING_CONFLICT'

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class CapacityExceededError(ConflictError):
    code = 'CAPACITY_EXCEEDED'


class InvalidTransitionError(ConflictError):
    code = 'INVALID_TRANSITION'


class AlreadyCheckedInError(ConflictError):
    code = 'ALREADY_CHECKED_IN'


class EventNotPublishedError(ConflictError):
    code = 'EVENT_NOT_PUBLISHED'


class EventAlreadyOccurredError(DomainError):
    code = 'EVENT_ALREADY_OCCURRED'


class PriceExceedsBaseError(ValidationError):
    code = 'PRICE_EXCEEDS_BASE'
