"""
Bounded retry for transient database conflicts

A serialization failure or deadlock aborts the whole transaction, so the
retried unit is the complete operation (a fresh Unit of Work each attempt),
never a single statement.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from src.platform.exception.exceptions import ConcurrencyConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.inventory_metrics import metrics


T = TypeVar('T')

# PostgreSQL: serialization_failure, deadlock_detected, lock_not_available
TRANSIENT_SQLSTATES = frozenset({'40001', '40P01', '55P03'})


def is_transient_conflict(error: BaseException) -> bool:
    if isinstance(error, OperationalError):
        # SQLite reports writer contention as OperationalError('database is locked')
        return True
    if isinstance(error, DBAPIError):
        sqlstate = getattr(error.orig, 'sqlstate', None) or getattr(error.orig, 'pgcode', None)
        return sqlstate in TRANSIENT_SQLSTATES
    return False


async def retry_on_transient_conflict(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    backoff_seconds: float,
    label: str,
) -> T:
    delay = backoff_seconds
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except DBAPIError as e:
            if not is_transient_conflict(e):
                raise
            if attempt >= max_attempts:
                Logger.base.error(f'[{label}] Gave up after {attempt} attempts: {e.orig}')
                metrics.record_transient_conflict(operation=label)
                raise ConcurrencyConflictError(
                    f'{label} lost a concurrent update race, retry the request'
                ) from e
            Logger.base.warning(
                f'[{label}] {attempt}/{max_attempts}: transient conflict, retry in {delay:.3f}s'
            )
            await asyncio.sleep(delay)
            delay *= 2

    # max_attempts < 1
    raise ConcurrencyConflictError(f'{label} was not attempted')
