from collections.abc import AsyncGenerator
from typing import Any, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .models import Model

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _enable_sqlite_unicode_lower(engine: AsyncEngine) -> None:
    """
    Replace SQLite's ASCII-only `lower()` on every DBAPI connection so
    case-insensitive lookups match non-ASCII text.
    """

    @event.listens_for(engine.sync_engine.pool, "connect")
    def _register_lower(dbapi_connection, _):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def init_db(
    database_url: str,
    *,
    echo: bool = False,
    **engine_kwargs: Any,
) -> None:
    """
    Initialize the asynchronous SQLAlchemy engine and session factory.

    Args:
        database_url: The connection URL (e.g., 'sqlite+aiosqlite:///tutorials.db').
        echo: If True, SQLAlchemy will log all emitted SQL.
        **engine_kwargs: Additional keyword arguments passed to `create_async_engine`.

    Example:
        >>> init_db("sqlite+aiosqlite:///tutorials.db")
    """
    global _engine, _session_factory

    # Normalize PostgreSQL async driver
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    is_sqlite = database_url.startswith("sqlite")

    options: dict[str, Any] = {
        "echo": echo,
        **engine_kwargs,
    }

    if is_sqlite:
        # SQLite does not support pooling options
        options.pop("pool_size", None)
        options.pop("max_overflow", None)
        options.pop("pool_pre_ping", None)
        options.setdefault("connect_args", {"check_same_thread": False})
    else:
        options.setdefault("pool_pre_ping", True)

    _engine = create_async_engine(database_url, **options)

    if is_sqlite:
        _enable_sqlite_unicode_lower(_engine)

    _session_factory = async_sessionmaker(
        bind=_engine,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_all() -> None:
    """
    Create every table registered on the `Model` metadata.

    Example:
        >>> await create_all()
    """
    engine = _require_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Model.metadata.create_all)


async def ping() -> bool:
    """
    Return True when the store answers a trivial query.

    Connection errors propagate to the caller.
    """
    engine = _require_engine()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def close_db() -> None:
    """
    Dispose of the database engine and clean up resources.

    Example:
        >>> await close_db()
    """
    if _engine is not None:
        await _engine.dispose()


def _require_engine() -> AsyncEngine:
    if _engine is None:
        msg = "Database not initialized. Call init_db() first."
        raise RuntimeError(msg)
    return _engine


def _require_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        msg = "Database not initialized. Call init_db() first."
        raise RuntimeError(msg)
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator that yields a database session.
    Suitable for use as a FastAPI dependency.

    Example:
        >>> async for db in get_db():
        ...     await db.execute(...)
    """
    factory = _require_session_factory()
    async with factory() as session:
        yield session
