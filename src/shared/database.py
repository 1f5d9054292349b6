"""Database engine and transaction boundary shared by all stores."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Connection, Engine, MetaData, create_engine, event
from sqlalchemy.exc import SQLAlchemyError

from shared.utils.logging import get_logger

logger = get_logger(__name__)

metadata = MetaData()


def open_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine and verify the database is reachable."""
    engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

    if engine.dialect.name == "sqlite":
        # SQLite leaves foreign keys off unless asked per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def ping(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
    except SQLAlchemyError:
        logger.warning("Database ping failed", exc_info=True)
        return False
    return True


@contextmanager
def transaction(engine: Engine, op: str = "") -> Iterator[Connection]:
    """Run a block on one connection inside one transaction.

    Commits when the block finishes, rolls back when it raises. A failed
    rollback is logged and the original exception is re-raised.
    """
    conn = engine.connect()
    tx = conn.begin()
    try:
        yield conn
        tx.commit()
    except BaseException:
        if tx.is_active:
            try:
                tx.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback failed", op=op, exc_info=True)
        raise
    finally:
        conn.close()
