import logging
from typing import Generator
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

from lms_backend.settings import settings

logger = logging.getLogger(__name__)

_database_options = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 5,
    "pool_timeout": 30,
    "pool_recycle": 300
}

def enable_sqlite_foreign_keys(engine: Engine):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def create_db_engine(url: str) -> Engine:

    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        enable_sqlite_foreign_keys(engine)
        return engine

    return create_engine(url, **_database_options)

_engine = create_db_engine(settings.DATABASE_URL)
_SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

def get_engine() -> Engine:
    return _engine

def get_db() -> Generator[Session, None, None]:

    db = _SessionLocal()

    try:
        yield db
    except OperationalError:
        logger.error("Database connection failed")
        db.rollback()
        raise
    finally:
        db.close()
