"""Inventory Domain Value Objects"""

from src.service.inventory.domain.value_object.bulk_item_outcome import BulkItemOutcome
from src.service.inventory.domain.value_object.time_window import (
    Clock,
    TimeWindow,
    to_utc,
    utc_now,
)

__all__ = ['BulkItemOutcome', 'Clock', 'TimeWindow', 'to_utc', 'utc_now']
