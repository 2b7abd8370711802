"""
Module: inventory_kernel.db.engine
Responsibility: Own the process-wide SQLAlchemy engine and session factory
    used by the stock history reader, the CLI and the tests.
Architecture position: Kernel > DB.  Imports models/ only inside
    create_tables/drop_tables, to register the stock_history table.

Failure modes:
    - RuntimeError from every accessor until init_engine_from_url() has run.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _build_engine(
    database_url: str,
    echo: bool,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
) -> Engine:
    if database_url.startswith("sqlite"):
        # One shared connection so an in-memory database outlives a session
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
    )


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
) -> Engine:
    """
    Create the engine and session factory, replacing any previous ones.

    SQLite URLs get a StaticPool; any other backend a QueuePool with the
    given sizing and pre-ping.
    """
    global _engine, _SessionFactory

    reset_engine()
    _engine = _build_engine(database_url, echo, pool_size, max_overflow, pool_pre_ping)
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("engine_initialized", extra={"dialect": _engine.dialect.name})
    return _engine


def _require_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


def get_engine() -> Engine:
    """The current engine.  Raises RuntimeError before initialization."""
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    return _require_factory()


def get_session() -> Session:
    """A new session; the caller closes it."""
    return _require_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session committed on normal exit, rolled back on error, always closed.

    Usage:
        with session_scope() as session:
            session.add(row)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("session_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create every table registered on Base.metadata."""
    from inventory_kernel.db.base import Base
    import inventory_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop every table registered on Base.metadata.  For tests."""
    from inventory_kernel.db.base import Base
    import inventory_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
