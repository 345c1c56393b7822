"""Usage log database: engine setup and session management."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentcmd.config.settings import DatabaseConfig

from .models import Base

logger = logging.getLogger(__name__)

_engine = None
_session_factory = None


def resolve_database_path(db_path: str | Path | None = None) -> Path:
    """Expand the usage log path, falling back to DatabaseConfig's default."""
    if not db_path:
        db_path = DatabaseConfig().path
    return Path(db_path).expanduser().resolve()


async def init_database(db_path: str | Path | None = None) -> Path:
    """Open the usage log and create the command_usage table.

    Re-initializing disposes of the previous engine first.

    Returns:
        Resolved path of the SQLite file.
    """
    global _engine, _session_factory

    path = resolve_database_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if _engine is not None:
        await close_database()

    _engine = create_async_engine(f"sqlite+aiosqlite:///{path}", echo=False)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Usage log at {path}")
    return path


async def close_database() -> None:
    """Dispose of the engine."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session; commits on success, rolls back on error."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
