from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_uow() -> MagicMock:
    """Unit of Work with AsyncMock repositories; `async with` yields itself."""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.event_repo = AsyncMock()
    uow.ticket_repo = AsyncMock()
    uow.venue_repo = AsyncMock()
    uow.user_repo = AsyncMock()
    uow.capacity_ledger = AsyncMock()
    uow.capacity_ledger.commit = MagicMock()
    uow.venue_scheduling_guard = AsyncMock()
    return uow


@pytest.fixture
def mock_uow_factory(mock_uow: MagicMock) -> Callable[[], Any]:
    return lambda: mock_uow
