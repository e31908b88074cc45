from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from salonbook.core.config import settings


def _async_database_url(database_url: str) -> str:
    """Use asyncpg for Postgres. asyncpg does not accept psycopg params like sslmode/channel_binding,
    so convert the scheme and strip them; SSL is enabled via connect_args instead."""
    parsed = urlparse(database_url)
    if parsed.scheme not in ("postgresql", "postgres"):
        return database_url
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse(("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


def _engine_kwargs() -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "echo": settings.env == "development",
        "pool_pre_ping": True,
    }
    if settings.is_postgres:
        kwargs.update(
            pool_size=5,
            max_overflow=10,
            connect_args={"ssl": True},  # hosted Postgres requires SSL; asyncpg uses this instead of sslmode
        )
    return kwargs


async_database_url = _async_database_url(settings.database_url)

engine = create_async_engine(async_database_url, **_engine_kwargs())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

