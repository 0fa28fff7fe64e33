"""Record store handle — async engine, transactional session scopes and connection policy.

One RecordStore is constructed per process by the application factory and
injected into repositories. Nothing touches the database until the first
session is opened; at that point the engine is created and the tables and
indexes are ensured, retrying according to the StoreRetryPolicy.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.domain.exceptions import ConflictError, StoreError
from app.infrastructure.database.base import Base
from app.infrastructure.database.models import AuditLogModel, RegistrationRecordModel  # noqa: F401

logger = logging.getLogger(__name__)


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


@dataclass(frozen=True)
class StoreRetryPolicy:
    """Connection retry configuration with capped exponential backoff."""

    max_attempts: int = 3
    backoff_seconds: float = 0.5
    max_backoff_seconds: float = 5.0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the zero-based ``attempt`` failed."""
        return min(self.backoff_seconds * (2**attempt), self.max_backoff_seconds)


class RecordStore:
    """Shared handle to the record store used by every repository."""

    def __init__(
        self,
        database_url: str,
        *,
        retry_policy: StoreRetryPolicy | None = None,
        echo: bool = False,
    ):
        self._url = _get_async_url(database_url)
        self._retry_policy = retry_policy or StoreRetryPolicy()
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._connected = False
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Create the engine and ensure tables exist. Safe to call repeatedly."""
        if self._connected:
            return

        async with self._connect_lock:
            if not self._connected:
                await self._connect()

    async def _connect(self) -> None:
        if self._engine is None:
            self._engine = create_async_engine(
                self._url,
                echo=self._echo,
                pool_pre_ping=True,
            )
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )

        policy = self._retry_policy
        attempts = max(policy.max_attempts, 1)
        for attempt in range(attempts):
            try:
                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except (DBAPIError, OSError) as exc:
                if attempt + 1 >= attempts:
                    logger.error("Record store unreachable after %d attempts: %s", attempts, exc)
                    raise StoreError(f"Could not connect to record store: {exc}", "connect") from exc
                delay = policy.delay_for(attempt)
                logger.warning(
                    "Record store connection failed (%s), retrying in %.1fs (attempt %d/%d)",
                    exc,
                    delay,
                    attempt + 1,
                    attempts,
                )
                await asyncio.sleep(delay)
            else:
                self._connected = True
                logger.info("Record store connected")
                return

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Transactional scope: commit on success, roll back and map errors on failure."""
        await self.connect()
        if self._session_factory is None:
            raise StoreError("Record store is not connected", "connect")
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            logger.warning("Record store integrity error: %s", exc.orig)
            raise ConflictError(f"Uniqueness constraint violated: {exc.orig}") from exc
        except (SQLAlchemyError, OSError) as exc:
            await session.rollback()
            logger.error("Record store error: %s", exc)
            raise StoreError(str(exc)) from exc
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def ping(self) -> None:
        """Round-trip a trivial statement. Raises StoreError when unreachable."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections; the next session reconnects lazily."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Record store connection closed")
        self._engine = None
        self._session_factory = None
        self._connected = False
