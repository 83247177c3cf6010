"""Database package: engine, session factory, init_db(), get_session(), use_session(), reset_db()."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from stockroom import config
from stockroom.db.base import Base

# Import all models so Base.metadata has all tables
from stockroom.db.models import (  # noqa: F401
    Category,
    Counter,
    Notification,
    NotificationRecipient,
    Product,
    SerialNumber,
    StockRequest,
    StorageLocation,
    User,
)
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.db")

_init_lock = threading.Lock()
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None
_database_url: str | None = None


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # SQLite leaves FK enforcement off per connection; cascades depend on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _get_engine(url: str) -> Engine:
    """Create engine; SQLite gets cross-thread use, a busy timeout and FK enforcement."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={
                "check_same_thread": False,
                "timeout": config.SQLITE_BUSY_TIMEOUT_SECONDS,
            },
        )
        event.listen(engine, "connect", _enable_sqlite_pragmas)
        return engine
    return create_engine(url, echo=False, pool_pre_ping=True)


def init_db(url: str | None = None) -> None:
    """Create engine and tables once per process. Later calls are no-ops."""
    global _engine, _SessionLocal, _database_url
    with _init_lock:
        if _SessionLocal is not None:
            return
        _database_url = url or config.DATABASE_URL
        _engine = _get_engine(_database_url)
        Base.metadata.create_all(bind=_engine)
        _SessionLocal = sessionmaker(bind=_engine, autocommit=False, autoflush=False, expire_on_commit=False)
        logger.info("db.initialized", dialect=_engine.dialect.name)


def reset_db(url: str | None = None, drop: bool = False) -> None:
    """Dispose the current engine and re-initialise against ``url`` (tests, CLI --database)."""
    global _engine, _SessionLocal
    with _init_lock:
        if _engine is not None:
            if drop:
                Base.metadata.drop_all(bind=_engine)
            _engine.dispose()
        _engine = None
        _SessionLocal = None
    init_db(url)


def get_engine() -> Engine:
    init_db()
    return _engine


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Context manager yielding a DB session: commit on success, rollback on any error."""
    init_db()
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def use_session(session: Session | None = None) -> Generator[Session, None, None]:
    """Join the caller's session when one is passed (caller commits), else open a new one."""
    if session is not None:
        yield session
        return
    with get_session() as own:
        yield own
