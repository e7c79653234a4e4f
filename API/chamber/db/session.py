import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from chamber.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Build the engine for DATABASE_URL with a small fixed pool."""
    url = settings.DATABASE_URL
    connect_args = {}
    engine_kwargs = {"pool_pre_ping": True}

    if url.startswith("sqlite"):
        # SQLite requires check_same_thread=False for FastAPI (multi-threaded)
        connect_args["check_same_thread"] = False
        connect_args["timeout"] = settings.DB_CONNECT_TIMEOUT
    else:
        connect_args["connect_timeout"] = settings.DB_CONNECT_TIMEOUT
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = 0
        engine_kwargs["pool_recycle"] = 280

    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)

    # Enable WAL mode for SQLite
    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def ensure_sqlite_directory(engine: Engine) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if engine.url.get_backend_name() != "sqlite":
        return
    database = engine.url.database
    if database and database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)
