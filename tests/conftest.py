import os

# Settings are read at import time; point them at SQLite before salonbook is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./salonbook_test.db")
os.environ.setdefault("ENV", "test")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import salonbook.models  # noqa: E402,F401 - register tables
from salonbook.models import Booking, ScheduleBlock, Staff  # noqa: E402

ANNA = "staff-anna"
BEN = "staff-ben"


def at(hhmm: str, day: str = "2024-01-10") -> datetime:
    """Naive UTC instant on the test day, e.g. at("09:30")."""
    return datetime.fromisoformat(f"{day}T{hhmm}:00")


def make_engine(path):
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


@pytest.fixture
async def engine(tmp_path):
    engine = make_engine(tmp_path / "salonbook_test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as s:
        s.add_all([Staff(id=ANNA, name="Anna"), Staff(id=BEN, name="Ben")])
        await s.commit()
        yield s


@pytest.fixture
def add(session):
    """Persist rows and return them."""

    async def _add(*rows):
        session.add_all(rows)
        await session.commit()
        return rows

    return _add


def booking(id: str, staff_id: str, start: str, end: str, **kw) -> Booking:
    return Booking(id=id, resource_id=staff_id, start=at(start), end=at(end), **kw)


def block(id: str, staff_id: str | None, start: str, end: str, **kw) -> ScheduleBlock:
    return ScheduleBlock(id=id, staff_id=staff_id, start=at(start), end=at(end), **kw)
