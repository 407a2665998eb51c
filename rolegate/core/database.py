"""Engine construction, per-request sessions and schema initialization."""

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from rolegate.core.config import Settings
from rolegate.models.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Create the engine for DATABASE_URL; SQLite gets FK enforcement and cross-thread use."""
    is_sqlite = settings.DATABASE_URL.startswith("sqlite")
    # SQLite needs check_same_thread, Postgres must NOT have it
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_schema(engine: Engine) -> None:
    """Create missing tables. Existing tables and rows are left untouched."""
    import rolegate.models  # noqa: F401  # register every table on Base.metadata

    Base.metadata.create_all(bind=engine, checkfirst=True)


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
