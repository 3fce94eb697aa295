"""
Database connection and transaction handling

This module centralises every way the application touches the database:
- SQLAlchemy engine and session factories (read-write and read-only)
- the unit-of-work context manager that wraps each atomic operation
- serialization-conflict detection (PostgreSQL and SQLite)
- connectivity check with retry, and schema / sample data bootstrap

PostgreSQL runs every transaction at SERIALIZABLE isolation. SQLite (WAL mode) has a
single writer: write transactions start with BEGIN IMMEDIATE so they take
the write lock up front, read-only sessions use a deferred BEGIN and only
ever see committed data.
"""
import logging
import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, Optional

from psycopg2 import errorcodes
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import settings
from .exceptions import ConflictAbortedError

logger = logging.getLogger(__name__)

# Base for ORM models
Base = declarative_base()

# PostgreSQL error codes that mean "another transaction won, try again"
CONFLICT_PGCODES = {
    errorcodes.SERIALIZATION_FAILURE,
    errorcodes.DEADLOCK_DETECTED,
    errorcodes.LOCK_NOT_AVAILABLE,
}

# Widest integer key either backend can bind (signed 64-bit)
MAX_ROW_ID = 2 ** 63 - 1


# ============================================================================
# Engine and session factories
# ============================================================================

def _configure_sqlite(engine: Engine) -> None:
    """Take transaction control away from pysqlite so BEGIN is ours to emit"""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        # Readers see the last committed snapshot and never block the writer
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get("read_only"):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str, lock_timeout: Optional[float] = None) -> Engine:
    """
    Build an engine with the isolation guarantees order placement needs

    Args:
        database_url: SQLAlchemy URL (postgresql+psycopg2://... or sqlite:///...)
        lock_timeout: Seconds to wait on a contended lock before aborting

    Returns:
        Configured SQLAlchemy Engine
    """
    if lock_timeout is None:
        lock_timeout = settings.DB_LOCK_TIMEOUT_SECONDS

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"timeout": lock_timeout, "check_same_thread": False},
        )
        _configure_sqlite(engine)
        return engine

    return create_engine(
        database_url,
        isolation_level="SERIALIZABLE",
        pool_pre_ping=True,  # Verify connection before use
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        connect_args={"options": f"-c lock_timeout={int(lock_timeout * 1000)}"},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory for units of work that write"""
    return sessionmaker(autoflush=False, bind=engine)


def create_read_session_factory(engine: Engine) -> sessionmaker:
    """Session factory for the query surface (committed data only)"""
    return sessionmaker(autoflush=False, bind=engine.execution_options(read_only=True))


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = create_session_factory(engine)
ReadSessionLocal = create_read_session_factory(engine)


def get_session_factory() -> sessionmaker:
    """
    FastAPI dependency returning the read-write session factory

    Usage:
        @router.post("/orders")
        def place(factory: sessionmaker = Depends(get_session_factory)):
            ...
    """
    return SessionLocal


def get_read_session_factory() -> sessionmaker:
    """FastAPI dependency returning the read-only session factory"""
    return ReadSessionLocal


# ============================================================================
# Units of work
# ============================================================================

def is_storable_id(value: int) -> bool:
    """False for ids no row can have; binding them would overflow the driver"""
    return -MAX_ROW_ID - 1 <= value <= MAX_ROW_ID


def is_serialization_conflict(error: DBAPIError) -> bool:
    """True when the database aborted us because of a concurrent writer"""
    if getattr(error.orig, "pgcode", None) in CONFLICT_PGCODES:
        return True
    return "database is locked" in str(error.orig)


@contextmanager
def unit_of_work(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Run a block as one atomic, isolated transaction

    Commits when the block finishes, rolls back on any exception (including
    cancellation), and always closes the session. Serialization conflicts,
    whether raised mid-transaction or at commit, become ConflictAbortedError.

    Usage:
        with unit_of_work(SessionLocal) as session:
            repo = CatalogRepository(session)
            ...
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except DBAPIError as e:
        session.rollback()
        if is_serialization_conflict(e):
            logger.warning(f"Transaction aborted by concurrent writer: {e.orig}")
            raise ConflictAbortedError(
                "Concurrent update conflict; nothing was applied, resubmit the request"
            ) from e
        logger.error(f"Database error, transaction rolled back: {e}")
        raise
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def read_session(session_factory: sessionmaker) -> Iterator[Session]:
    """Session for read-only projections; never commits"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# Connectivity check with retry
# ============================================================================

def check_database(bind: Optional[Engine] = None, max_retries: int = 3, retry_delay: float = 1.0) -> float:
    """
    Verify the database answers a trivial query, retrying on connection errors

    Args:
        bind: Engine to check (default: application engine)
        max_retries: Maximum number of attempts (default: 3)
        retry_delay: Initial delay between attempts in seconds (default: 1.0)

    Returns:
        Query latency in milliseconds

    Raises:
        sqlalchemy.exc.OperationalError: If all attempts fail
    """
    # Read-only so that on SQLite the probe never waits for the writer lock
    bind = (bind or engine).execution_options(read_only=True)
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database check attempt {attempt}/{max_retries}")
            start = time.time()
            with bind.connect() as conn:
                conn.execute(text("SELECT 1"))
            return round((time.time() - start) * 1000, 2)

        except OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e.orig}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error


# ============================================================================
# Schema bootstrap
# ============================================================================

SAMPLE_CATALOG = [
    {
        "name": "Sunrise Textiles",
        "contact": "sunrise@example.com",
        "items": [
            ("Cotton T-Shirt", "M", "White", Decimal("199.00"), 50),
            ("Denim Jeans", "32", "Blue", Decimal("899.00"), 20),
        ],
    },
    {
        "name": "Metro Garments",
        "contact": "metro@example.com",
        "items": [
            ("Summer Dress", "L", "Red", Decimal("499.00"), 10),
            ("Formal Shirt", "M", "Sky Blue", Decimal("349.00"), 30),
        ],
    },
]


def init_db(bind: Optional[Engine] = None, drop: bool = False, load_sample_data: bool = False) -> None:
    """
    Create all tables, optionally dropping them first and loading sample data

    Sample data is only loaded into an empty vendors table.
    """
    from garment_exchange import models

    bind = bind or engine

    if drop:
        logger.info("Dropping all tables")
        Base.metadata.drop_all(bind=bind)

    Base.metadata.create_all(bind=bind)
    logger.info("Schema ready")

    if not load_sample_data:
        return

    with unit_of_work(create_session_factory(bind)) as session:
        if session.query(models.Vendor).first() is not None:
            logger.info("Catalog already populated, skipping sample data")
            return

        for entry in SAMPLE_CATALOG:
            vendor = models.Vendor(name=entry["name"], contact=entry["contact"])
            for name, size, color, price, quantity in entry["items"]:
                vendor.items.append(models.Item(
                    name=name, size=size, color=color,
                    price=price, quantity=quantity, available=True,
                ))
            session.add(vendor)

    logger.info(f"Loaded sample catalog ({len(SAMPLE_CATALOG)} vendors)")
