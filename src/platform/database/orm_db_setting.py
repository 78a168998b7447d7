"""
SQLAlchemy async engine and session management

Database owns one AsyncEngine per event loop and hands out an async_sessionmaker.
The URL defaults to settings.DATABASE_URL_ASYNC (postgresql+asyncpg); tests pass a
sqlite+aiosqlite URL instead.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    """
    Event-loop-aware engine holder.

    An asyncpg pool cannot be shared across event loops ("attached to a different
    loop"), so a new engine is created whenever the running loop changes.
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.db_url = db_url or settings.DATABASE_URL_ASYNC
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_sqlite(self) -> bool:
        return self.db_url.startswith('sqlite')

    @property
    def engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
            self._engine = self._create_engine()
            self._session_factory = None
            self._loop = current_loop
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        engine = self.engine
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    def _create_engine(self) -> AsyncEngine:
        kwargs: dict[str, Any] = {'echo': False}
        if self.is_sqlite:
            # writers take the RESERVED lock up front and wait instead of failing fast
            kwargs['connect_args'] = {'isolation_level': 'IMMEDIATE', 'timeout': 30}
        else:
            kwargs |= {
                'pool_size': settings.DB_POOL_SIZE,
                'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
                'pool_timeout': settings.DB_POOL_TIMEOUT,
                'pool_recycle': settings.DB_POOL_RECYCLE,
                'pool_pre_ping': settings.DB_POOL_PRE_PING,
            }
        Logger.base.info(f'🔗 [DB] Creating engine for {self.engine_label}')
        return create_async_engine(self.db_url, **kwargs)

    @property
    def engine_label(self) -> str:
        # never log credentials
        return self.db_url.split('@')[-1]

    async def create_all(self) -> None:
        """Create tables without alembic (tests and local sqlite runs)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._loop = None
