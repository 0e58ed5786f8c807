#!/usr/bin/env python3
"""
Start the inventory API under granian

Usage:
    python -m scripts.serve

Host, port, worker count and access logging come from Settings (.env).
Alembic owns the PostgreSQL schema, so run
`alembic -c src/platform/alembic/alembic.ini upgrade head` first.
"""

from granian import Granian
from granian.constants import Interfaces

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def main() -> None:
    Logger.base.info(
        f'🌐 [Serve] granian src.main:app on {settings.SERVER_HOST}:{settings.SERVER_PORT} '
        f'workers={settings.SERVER_WORKERS}'
    )
    Granian(
        'src.main:app',
        address=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        interface=Interfaces.ASGI,
        workers=settings.SERVER_WORKERS,
        log_access=settings.SERVER_ACCESS_LOG,
    ).serve()


if __name__ == '__main__':
    main()
