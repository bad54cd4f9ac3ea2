from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.orm import DeclarativeBase

from wms.infrastructure.config.settings import Settings, get_settings

settings = get_settings()

# Stable constraint names so migrations can refer to them
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def engine_options(settings: Settings) -> dict[str, Any]:
    """Pool settings for PostgreSQL; SQLite (tests, local runs) takes the defaults"""
    if settings.is_sqlite:
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": 20,
        "max_overflow": 30,
        "pool_recycle": 3600,
        "connect_args": {"server_settings": {"jit": "off"}, "command_timeout": 60},
    }


engine = create_async_engine(
    settings.database_url, echo=settings.database_echo, **engine_options(settings)
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base; tables live in DATABASE_SCHEMA when one is configured"""

    metadata = MetaData(schema=settings.database_schema, naming_convention=NAMING_CONVENTION)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Session for read endpoints; nothing is committed"""
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """
    Session for write endpoints.

    The whole request runs in one transaction: committed when the handler
    returns, rolled back when it raises or is cancelled.
    """
    async with AsyncSessionLocal() as session, session.begin():
        yield session
