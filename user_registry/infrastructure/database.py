"""Database Session Manager: async connection pool, connection state and schema bootstrap.

Invariants:
    - State moves uninitialized -> connecting -> ready; failed and closed are terminal
    - ready is only entered after a successful ping AND schema/index creation
    - A connection-level error at runtime moves ready -> disconnected; ensure_ready()
      re-pings and returns to ready on success
    - Every session rolls back on exception (no partial commits leak)
    - SQLAlchemy exceptions other than IntegrityError are mapped to DatabaseError

Design Decisions:
    - Manager instance owned by the app (app.state.db), not a module global: the
      gateway receives its session explicitly and readiness is an explicit query
    - IntegrityError re-raised untouched: only the gateway knows which constraint
      it hit and how to name it (duplicate email)
    - StaticPool for SQLite: one shared connection keeps :memory: databases alive
      across sessions
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from user_registry.core.domain_types import ConnectionState
from user_registry.core.errors import DatabaseError, DatabaseUnavailableError
from user_registry.db.base import Base
import user_registry.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"poolclass": StaticPool}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine, hands out sessions, tracks connection readiness."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        connect_timeout: float = 5.0,
    ):
        self.engine: AsyncEngine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.connect_timeout = connect_timeout
        self.state = ConnectionState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    def _transition(self, new_state: ConnectionState) -> None:
        if new_state is not self.state:
            logger.info(f"Database connection {self.state.value} -> {new_state.value}")
        self.state = new_state

    async def connect(self) -> None:
        """Ping the database and create missing tables/indexes, then become ready.

        Raises DatabaseError (state failed) when the database cannot be reached
        within connect_timeout or the schema cannot be created.
        """
        self._transition(ConnectionState.CONNECTING)
        try:
            await asyncio.wait_for(self._bootstrap(), timeout=self.connect_timeout)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            self._transition(ConnectionState.FAILED)
            logger.error(f"Database connection failed: {e!r}")
            raise DatabaseError(repr(e), "connect") from e
        self._transition(ConnectionState.READY)
        logger.info(
            f"Database connected ({self.engine.url.get_backend_name()}:"
            f"{self.engine.url.database})",
        )

    async def _bootstrap(self) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

    async def ensure_ready(self) -> None:
        """Raise DatabaseUnavailableError unless the connection is usable."""
        if self.state is ConnectionState.DISCONNECTED and await self.health_check():
            self._transition(ConnectionState.READY)
        if not self.is_ready:
            raise DatabaseUnavailableError(self.state.value)

    def mark_disconnected(self) -> None:
        if self.state is ConnectionState.READY:
            logger.warning("Database disconnected")
            self._transition(ConnectionState.DISCONNECTED)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError:
            await session.rollback()
            raise
        except (OperationalError, InterfaceError) as e:
            await session.rollback()
            self.mark_disconnected()
            logger.error(f"DB connection error: {e}")
            raise DatabaseError(str(e), "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError(str(e), "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError(str(e), "unknown") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        if self.state in (ConnectionState.CLOSED, ConnectionState.FAILED):
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        """Close every pooled connection; the manager cannot be reused."""
        await self.engine.dispose()
        self._transition(ConnectionState.CLOSED)
        logger.info("Database connection closed")
