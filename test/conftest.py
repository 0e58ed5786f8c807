"""
Test Configuration and Fixtures

- Every integration test gets its own SQLite (aiosqlite) database file
- The DI container is overridden with that database and a frozen clock
- `seed` writes users, venues, events and tickets directly through the repositories

Unit tests (marked `unit`) use AsyncMock collaborators and need none of this.
"""

# =============================================================================
# Environment setup MUST happen before any application import:
# settings are read once at import time
# =============================================================================
import os


os.environ['LOG_TO_FILE'] = 'false'
os.environ['DEBUG'] = 'false'
os.environ['COMPLETION_SWEEP_INTERVAL_SECONDS'] = '0'
os.environ['CAPACITY_RETRY_BACKOFF_SECONDS'] = '0.01'
# SQLite writers that lose a lock upgrade get 'database is locked' and retry
os.environ['CAPACITY_RESERVE_MAX_RETRIES'] = '10'

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402
import itertools  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Optional  # noqa: E402

from dependency_injector import providers  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.core_setting import Settings  # noqa: E402
from src.platform.config.di import Container, container  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import AbstractUnitOfWork  # noqa: E402
from src.platform.state.event_lock_registry import EventLockRegistry  # noqa: E402
from src.service.inventory.domain.entity.event_entity import EventEntity  # noqa: E402
from src.service.inventory.domain.entity.ticket_entity import TicketEntity  # noqa: E402
from src.service.inventory.domain.entity.user_entity import UserEntity  # noqa: E402
from src.service.inventory.domain.entity.venue_entity import VenueEntity  # noqa: E402
from src.service.inventory.domain.enum.event_status import EventStatus  # noqa: E402
from src.service.inventory.domain.enum.user_role import UserRole  # noqa: E402
from inventory_test_constants import EVENT_END, EVENT_START, FIXED_NOW  # noqa: E402
from test_main import test_app  # noqa: E402


class FrozenClock:
    """Injected in place of the wall clock; tests move time explicitly."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FIXED_NOW)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "inventory.db"}')
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def test_container(database: Database, clock: FrozenClock) -> Iterator[Container]:
    container.database.override(providers.Object(database))
    container.clock.override(providers.Object(clock))
    container.event_lock_registry.override(
        providers.Singleton(EventLockRegistry, timeout_seconds=5.0)
    )
    yield container
    container.reset_override()
    container.reset_singletons()


@pytest.fixture
def uow_factory(test_container: Container) -> Callable[[], AbstractUnitOfWork]:
    return test_container.unit_of_work


@pytest.fixture
def lock_registry(test_container: Container) -> EventLockRegistry:
    return test_container.event_lock_registry()


class Seeder:
    """Writes fixtures straight through the repositories, bypassing use case rules."""

    _emails = itertools.count(1)

    def __init__(self, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    async def user(self, role: UserRole = UserRole.ATTENDEE, name: str = '') -> UserEntity:
        email = f'{role.value}{next(self._emails)}@example.com'
        async with self.uow_factory() as uow:
            user = await uow.user_repo.create(
                user=UserEntity(email=email, name=name or email, role=role)
            )
            await uow.commit()
        return user

    async def venue(self, capacity: int = 500, name: str = 'Town Hall') -> VenueEntity:
        async with self.uow_factory() as uow:
            venue = await uow.venue_repo.create(venue=VenueEntity(name=name, capacity=capacity))
            await uow.commit()
        return venue

    async def event(
        self,
        *,
        organizer: UserEntity,
        venue: Optional[VenueEntity] = None,
        status: EventStatus = EventStatus.PUBLISHED,
        start: Optional[datetime] = EVENT_START,
        end: Optional[datetime] = EVENT_END,
        base_price: Optional[int] = 5000,
        max_attendees: Optional[int] = 100,
        name: str = 'Spring Concert',
    ) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.create(
                event=EventEntity(
                    name=name,
                    organizer_id=organizer.id,  # type: ignore[arg-type]
                    venue_id=venue.id if venue else None,
                    start=start,
                    end=end,
                    base_price=base_price,
                    max_attendees=max_attendees,
                    status=status,
                )
            )
            await uow.commit()
        return event

    async def ticket(self, *, event: EventEntity, user: UserEntity, price: int = 5000) -> TicketEntity:
        """An active ticket with its unit reserved, as a purchase would leave it."""
        async with self.uow_factory() as uow:
            token = await uow.capacity_ledger.reserve(event_id=event.id, count=1)  # type: ignore[arg-type]
            ticket = await uow.ticket_repo.create(
                ticket=TicketEntity(event_id=event.id, user_id=user.id, price_paid=price)  # type: ignore[arg-type]
            )
            await uow.commit()
        uow.capacity_ledger.commit(token)
        return ticket

    async def reload_event(self, event_id: int) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)
        assert event is not None
        return event

    async def reload_ticket(self, ticket_id: int) -> TicketEntity:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
        assert ticket is not None
        return ticket


@pytest.fixture
def seed(uow_factory: Callable[[], AbstractUnitOfWork]) -> Seeder:
    return Seeder(uow_factory)


@pytest.fixture
async def organizer(seed: Seeder) -> UserEntity:
    return await seed.user(UserRole.ORGANIZER)


@pytest.fixture
async def admin(seed: Seeder) -> UserEntity:
    return await seed.user(UserRole.ADMIN)


@pytest.fixture
async def attendee(seed: Seeder) -> UserEntity:
    return await seed.user(UserRole.ATTENDEE)


@pytest.fixture
async def venue(seed: Seeder) -> VenueEntity:
    return await seed.venue(capacity=500)


@pytest.fixture
async def async_client(test_container: Container) -> AsyncIterator[httpx.AsyncClient]:
    """In-process HTTP client; runs the test app lifespan so the container is wired."""
    async with test_app.router.lifespan_context(test_app):
        transport = httpx.ASGITransport(app=test_app)
        async with httpx.AsyncClient(transport=transport, base_url='http://test') as client:
            yield client


def as_actor(user: UserEntity) -> dict[str, str]:
    return {'X-User-Id': str(user.id)}


@pytest.fixture
def auth_headers() -> Callable[[UserEntity], dict[str, str]]:
    return as_actor
