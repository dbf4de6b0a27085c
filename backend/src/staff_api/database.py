"""Async engine, session factory and the per-request session dependency."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from staff_api.config import get_settings
from staff_api.utils.secure_logging import log_warning

logger = logging.getLogger(__name__)

_settings = get_settings()

engine = create_async_engine(
    _settings.async_database_url,
    pool_size=_settings.database_pool_size,
    max_overflow=_settings.database_max_overflow,
    pool_pre_ping=True,
    pool_recycle=_settings.database_pool_recycle_seconds,
    # Statements carry personal data; never echo them
    echo=False,
)

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request.

    The session commits when the request handler returns and rolls back on
    a database error, which is then re-raised for the error handlers.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            log_warning(logger, "Rolling back request transaction", e)
            await session.rollback()
            raise
