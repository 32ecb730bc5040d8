from typing import Optional
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import InterfaceError, OperationalError, ProgrammingError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from ..config import settings
from ..exceptions import BackendUnavailableError
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()

# Columns introduced after the first schema; added to older databases on bootstrap
ADDITIVE_COLUMNS = {
    "users": [
        ("full_name", "TEXT"),
        ("profile_picture", "TEXT"),
        ("bio", "TEXT"),
        ("updated_at", "TIMESTAMP"),
    ],
    "projects": [
        ("section", "TEXT"),
        ("group_number", "TEXT"),
        ("full_name", "TEXT"),
        ("matricule", "TEXT"),
        ("updated_at", "TIMESTAMP"),
    ],
    "reviews": [
        ("updated_at", "TIMESTAMP"),
    ],
}


def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable WAL mode, busy timeout and foreign keys for SQLite connections"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")  # 30 seconds in milliseconds
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _is_duplicate_column_error(error: Exception) -> bool:
    message = str(error).lower()
    return "duplicate column" in message or "already exists" in message


# Substrings of driver messages that mean the backend could not be reached or answered in time
CONNECTIVITY_MARKERS = (
    "could not connect",
    "connection refused",
    "connection reset",
    "server closed the connection",
    "terminating connection",
    "unable to open database file",
    "database is locked",
    "timeout",
    "timed out",
)


def is_connectivity_error(error: Exception) -> bool:
    """True for lost, refused or timed-out connections, False for SQL and schema defects"""
    if isinstance(error, InterfaceError):
        return True
    if not isinstance(error, OperationalError):
        return False
    if error.connection_invalidated:
        return True
    message = str(error.orig if error.orig is not None else error).lower()
    return any(marker in message for marker in CONNECTIVITY_MARKERS)


class Database:
    """
    Engine, session factory and schema bootstrap for one relational backend.

    The embedded backend (SQLite) is a single file accessed in-process with no
    bounded pool. The networked backend (PostgreSQL) gets a small fixed pool
    with connect and idle timeouts suited to cold starts. Call sites only ever
    see sessions, never the backend.
    """

    def __init__(
        self,
        url: str,
        environment: str = "development",
        pool_size: int = 5,
        pool_timeout: int = 30,
        connect_timeout: int = 30,
        idle_timeout: int = 30,
        echo: bool = False,
    ):
        self.url = make_url(url)
        self.environment = environment.lower()
        self.schema_ready = False

        if self.backend == "sqlite":
            options = {
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": 30.0,  # Wait up to 30 seconds for lock to be released
                },
            }
            if self.url.database in (None, "", ":memory:"):
                # A single shared connection keeps the in-memory database alive
                options["poolclass"] = StaticPool
        else:
            options = {
                "pool_size": pool_size,
                "max_overflow": 0,
                "pool_timeout": pool_timeout,
                "pool_recycle": idle_timeout,
                "pool_pre_ping": True,  # Verify connections before using
                "connect_args": {"connect_timeout": connect_timeout},
            }

        self.engine = create_engine(self.url, echo=echo, **options)
        if self.backend == "sqlite":
            event.listen(self.engine, "connect", set_sqlite_pragma)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info(f"Database engine created for backend: {self.backend}")

    @property
    def backend(self) -> str:
        return self.url.get_backend_name()

    def init_schema(self, fail_fast: Optional[bool] = None) -> bool:
        """
        Create missing tables and apply additive column migrations.

        Safe to run repeatedly. Connectivity failures are fatal only when
        fail_fast is set (defaults to True in development); otherwise they are
        logged and False is returned so the service can keep serving
        endpoints that do not need the database.
        """
        from .. import models  # noqa: F401 - registers tables on Base.metadata

        if fail_fast is None:
            fail_fast = self.environment == "development"

        logger.info("Initializing database schema...")
        try:
            Base.metadata.create_all(bind=self.engine)
            self._apply_additive_migrations()
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Failed to initialize database schema: {e}")
            if fail_fast or not is_connectivity_error(e):
                raise
            logger.warning("Continuing without schema initialization, data endpoints will return 503")
            self.schema_ready = False
            return False

        self.schema_ready = True
        logger.info("Database schema initialized successfully")
        return True

    def _apply_additive_migrations(self) -> None:
        inspector = inspect(self.engine)
        for table, columns in ADDITIVE_COLUMNS.items():
            existing = {column["name"] for column in inspector.get_columns(table)}
            for name, ddl_type in columns:
                if name in existing:
                    continue
                try:
                    with self.engine.begin() as conn:
                        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {ddl_type}"))
                    logger.info(f"Added column {table}.{name}")
                except (OperationalError, ProgrammingError) as e:
                    # Another process may have added it between inspection and ALTER
                    if not _is_duplicate_column_error(e):
                        raise
                    logger.debug(f"Column {table}.{name} already present")

    def ensure_ready(self) -> None:
        """Retry bootstrap if it failed earlier; raise 503 while the backend is down"""
        if self.schema_ready:
            return
        if not self.init_schema(fail_fast=False):
            raise BackendUnavailableError()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


_database: Optional[Database] = None


def create_database() -> Database:
    """Build a Database from process settings"""
    return Database(
        settings.database_url,
        environment=settings.environment,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
        connect_timeout=settings.db_connect_timeout,
        idle_timeout=settings.db_idle_timeout,
        echo=settings.debug,
    )


def init_db() -> Database:
    """Initialize the process-wide database once at startup"""
    global _database
    if _database is None:
        _database = create_database()
    _database.init_schema()
    return _database


def get_database() -> Database:
    if _database is None:
        raise BackendUnavailableError("Database not initialized")
    return _database


def get_db():
    """Dependency for getting database session"""
    database = get_database()
    database.ensure_ready()
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def shutdown_db() -> None:
    """Dispose the process-wide database on shutdown"""
    global _database
    if _database is not None:
        _database.dispose()
        _database = None
