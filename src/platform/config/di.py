"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.event_lock_registry import EventLockRegistry
from src.service.inventory.domain.value_object.time_window import utc_now


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (one engine per process; URL from settings unless overridden in tests)
    database = providers.Singleton(Database)

    # Unit of Work: a new instance (and session) per call.
    # Use cases inject `Container.unit_of_work.provider` to open several in one request
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        session_factory=database.provided.session_maker,
    )

    # In-process per-event serialization
    event_lock_registry = providers.Singleton(
        EventLockRegistry,
        timeout_seconds=config_service.provided.EVENT_LOCK_TIMEOUT_SECONDS,
    )

    # Wall clock, overridden with a fixed time in tests
    clock = providers.Object(utc_now)


container = Container()
