"""Shared store handle: one engine, one session factory, one lock."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
import structlog

from callcal.core.exceptions import StorageError
from callcal.db.engine import close_db, init_db

logger = structlog.get_logger()


class AttendanceStore:
    """Serializes every unit of work against the backing database.

    Each ``transaction()`` holds the lock for its whole duration, so
    conditional writes cannot interleave. Callers must not nest them.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """Run one locked unit of work; commit on success, roll back on error.

        Driver errors are logged and re-raised as ``StorageError``.
        """
        async with self._lock:
            async with self._session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except SQLAlchemyError as e:
                    await session.rollback()
                    logger.error("Store operation failed", operation=operation, error=str(e))
                    raise StorageError(
                        f"{operation} failed", details={"error": str(e)}
                    ) from e
                except Exception:
                    await session.rollback()
                    raise

    async def create_schema(self) -> None:
        """Create missing tables."""
        try:
            await init_db(self.engine)
        except SQLAlchemyError as e:
            logger.error("Schema creation failed", error=str(e))
            raise StorageError("create schema failed", details={"error": str(e)}) from e

    async def close(self) -> None:
        """Dispose of pooled connections."""
        await close_db(self.engine)
