"""Database engine creation and schema bootstrap."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from callcal.config.settings import Settings, settings as default_settings


def create_engine(config: Optional[Settings] = None, **overrides: Any) -> AsyncEngine:
    """Create the async engine described by ``config``."""
    config = config or default_settings
    kwargs: dict[str, Any] = {"echo": config.app_debug}
    if not config.is_sqlite:
        kwargs.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
        )
    kwargs.update(overrides)
    return create_async_engine(config.database_url, **kwargs)


async def init_db(engine: AsyncEngine) -> None:
    """Create tables that do not exist yet."""
    from callcal.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
