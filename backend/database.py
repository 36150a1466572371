from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config.database_config import get_database_url, is_echo_enabled

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def is_memory_sqlite(url: str) -> bool:
    """True for SQLite URLs that point at a private in-memory database."""
    if not url.startswith("sqlite"):
        return False
    path = url.split("://", 1)[-1].lstrip("/")
    return path in ("", ":memory:") or "mode=memory" in url


def create_db_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine.

    In-memory SQLite gets a single shared connection, since each new
    connection would open an empty database. Every other URL, file-backed
    SQLite included, gets a real pool so that independent units of work run
    on separate connections and the database isolates their transactions.
    File-backed SQLite runs in WAL mode with foreign keys switched on.
    """
    is_sqlite = url.startswith("sqlite")
    engine_kwargs: dict[str, Any] = {"echo": echo}

    if is_memory_sqlite(url):
        engine_kwargs.update(
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs.update(
            pool_size=20,  # Concurrent units of work + API requests
            max_overflow=30,  # Peak load
            pool_pre_ping=True,  # Verify connections are alive before using
            pool_recycle=3600,  # Recycle connections after 1 hour to prevent stale connections
        )

    engine = create_async_engine(url, **engine_kwargs)

    if is_sqlite:
        use_wal = not is_memory_sqlite(url)

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            if use_wal:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=5000")  # Wait up to 5s for locks instead of failing immediately
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by UnitOfWork; sessions never autocommit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """Process-wide engine, built from configuration on first use."""
    global _engine
    if _engine is None:
        _engine = create_db_engine(get_database_url(), echo=is_echo_enabled())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections and forget the process-wide engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None

