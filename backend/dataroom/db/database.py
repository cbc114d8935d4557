"""Database connection and session management.

The engine is built lazily from settings.get_database_url_auto() so that
importing this module never touches the filesystem.

Usage:
    from dataroom.db.database import get_session_factory

    db = get_session_factory()()
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dataroom.settings import settings
from dataroom.utils import get_logger

logger = get_logger(__name__)

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, enabling SQLite foreign keys so cascades apply."""
    kwargs: dict = {"echo": echo}

    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # One shared connection, otherwise every thread sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update({"pool_pre_ping": True, "pool_recycle": 3600})

    engine = create_engine(url, **kwargs)

    if is_sqlite:

        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = settings.get_database_url_auto()
        _engine = build_engine(url, echo=settings.debug and settings.is_local_dev())
        logger.info(f"Using database: {url.split('@')[-1]}")
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory


def check_connection() -> bool:
    """Check if the database connection is working."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def init_db() -> None:
    """Create tables if they do not exist. Called on application startup."""
    from dataroom.db.models import Base

    try:
        Base.metadata.create_all(bind=get_engine())
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def close_db() -> None:
    """Dispose of pooled connections. Called on application shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        logger.info("Database connections closed")
    _engine = None
    _session_factory = None
