"""
SQLAlchemy async engine and session management

Database owns one lazily created engine per instance:
- PostgreSQL (asyncpg): pooled engine, pool sizes from settings
- SQLite (aiosqlite): NullPool, used by local development and the test suite

The Unit of Work takes `Database.session_maker` and opens one session per
operation; repositories never create sessions themselves.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(self, url: Optional[str] = None) -> None:
        self._url = url or settings.DATABASE_URL_ASYNC
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_sqlite(self) -> bool:
        return self._url.startswith('sqlite')

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    def _create_engine(self) -> AsyncEngine:
        if self.is_sqlite:
            Logger.base.info(f'🔗 [DB] Creating SQLite engine: {self._url}')
            return create_async_engine(
                self._url,
                echo=False,
                poolclass=NullPool,
                connect_args={'timeout': 30},
            )

        Logger.base.info('🔗 [DB] Creating PostgreSQL engine')
        return create_async_engine(
            self._url,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Standalone session for reads outside a Unit of Work"""
        async with self.session_maker() as session:
            yield session

    async def create_all(self) -> None:
        # Import models so they register on Base.metadata
        import src.service.inventory.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('✅ [DB] Tables ensured')

    async def drop_all(self) -> None:
        import src.service.inventory.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
