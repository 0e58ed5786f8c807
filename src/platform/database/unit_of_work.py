"""
Unit of Work Pattern

Architecture:
- UoW owns the session lifecycle (one session per `async with`)
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories and the capacity ledger share the UoW session
- Use cases coordinate repositories through the UoW
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.inventory.app.interface.i_capacity_ledger import ICapacityLedger
    from src.service.inventory.app.interface.i_event_repo import IEventRepo
    from src.service.inventory.app.interface.i_ticket_repo import ITicketRepo
    from src.service.inventory.app.interface.i_user_repo import IUserRepo
    from src.service.inventory.app.interface.i_venue_repo import IVenueRepo
    from src.service.inventory.app.interface.i_venue_scheduling_guard import (
        IVenueSchedulingGuard,
    )


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the inventory service

    Usage:
        async with uow:
            token = await uow.capacity_ledger.reserve(event_id=event.id, count=1)
            ticket = await uow.ticket_repo.create(ticket=...)
            await uow.commit()
    """

    event_repo: IEventRepo
    ticket_repo: ITicketRepo
    venue_repo: IVenueRepo
    user_repo: IUserRepo
    capacity_ledger: ICapacityLedger
    venue_scheduling_guard: IVenueSchedulingGuard

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self):
        from src.service.inventory.driven_adapter.repo.event_repo_impl import EventRepoImpl
        from src.service.inventory.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
        from src.service.inventory.driven_adapter.repo.user_repo_impl import UserRepoImpl
        from src.service.inventory.driven_adapter.repo.venue_repo_impl import VenueRepoImpl
        from src.service.inventory.driven_adapter.state.capacity_ledger_impl import (
            CapacityLedgerImpl,
        )
        from src.service.inventory.driven_adapter.state.venue_scheduling_guard_impl import (
            VenueSchedulingGuardImpl,
        )

        self.session = self.session_factory()

        # Repositories share the session of this unit of work
        self.event_repo = EventRepoImpl(self.session)
        self.ticket_repo = TicketRepoImpl(self.session)
        self.venue_repo = VenueRepoImpl(self.session)
        self.user_repo = UserRepoImpl(self.session)
        self.capacity_ledger = CapacityLedgerImpl(self.session)
        self.venue_scheduling_guard = VenueSchedulingGuardImpl(self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self):
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
