"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from callcal.db.models import Base, CheckInEvent, Member
from callcal.db.store import AttendanceStore
from callcal.services.attendance import AttendanceService
from callcal.services.attendance.clock import BOT_TZ


# Use an in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """A bot-local (UTC+8) wall clock time."""
    return datetime(year, month, day, hour, minute, second, tzinfo=BOT_TZ)


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def store(db_engine) -> AttendanceStore:
    return AttendanceStore(db_engine)


@pytest.fixture
def service(store) -> AttendanceService:
    return AttendanceService(store)


@pytest.fixture
def add_member(store):
    """Insert a member directly, with an explicit roster position."""
    counter = {"n": 0}

    async def _add(
        nickname: str,
        sort_key: int = 0,
        group_nickname: Optional[str] = None,
        uin: Optional[int] = None,
        credential: Optional[str] = None,
    ) -> int:
        counter["n"] += 1
        uin = uin if uin is not None else 10000 + counter["n"]
        async with store.transaction("add test member") as db:
            member = Member(
                external_uid=f"uid-{uin}",
                external_uin=uin,
                nickname=nickname,
                group_nickname=group_nickname,
                sort_key=sort_key,
                credential=credential,
            )
            db.add(member)
            await db.flush()
            return member.id

    return _add


@pytest.fixture
def add_event(store):
    """Insert a check-in event bypassing the ledger."""

    async def _add(member_id: int, created_at: datetime) -> None:
        async with store.transaction("add test event") as db:
            db.add(CheckInEvent(member_id=member_id, created_at=created_at))

    return _add


@pytest.fixture
def count_events(store):
    async def _count(member_id: Optional[int] = None) -> int:
        stmt = select(func.count()).select_from(CheckInEvent)
        if member_id is not None:
            stmt = stmt.where(CheckInEvent.member_id == member_id)
        async with store.transaction("count test events") as db:
            return (await db.execute(stmt)).scalar_one()

    return _count
