from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Inventory Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_TO_FILE: bool = False  # Rotating file sink under logs/ (stdout is always on)

    # HTTP server (granian)
    SERVER_HOST: str = '0.0.0.0'
    SERVER_PORT: int = 8100
    SERVER_WORKERS: int = 1  # Event locks are per process; row locks cover multiple workers
    SERVER_ACCESS_LOG: bool = True

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'inventory'
    POSTGRES_PASSWORD: SecretStr = SecretStr('inventory')
    POSTGRES_DB: str = 'event_inventory'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Full async URL override, e.g. sqlite+aiosqlite:///./dev.db
    AUTO_CREATE_TABLES: bool = False  # Alembic owns the schema outside local development

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Capacity ledger
    CAPACITY_RESERVE_MAX_RETRIES: int = 3  # Attempts on transient DB conflicts before 503
    CAPACITY_RETRY_BACKOFF_SECONDS: float = 0.05
    EVENT_LOCK_TIMEOUT_SECONDS: float = 5.0

    # Bulk operations
    BULK_MAX_CONCURRENCY: int = 8
    BULK_MAX_ITEMS: int = 500

    # Event completion sweep (0 disables the background task)
    COMPLETION_SWEEP_INTERVAL_SECONDS: float = 60.0


settings = Settings()  # type: ignore
