# storefront/database.py
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine configuration
#
# Postgres (production):
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size/max_overflow kept small; the pooler limits clients
# - pool_pre_ping=True: validate connections before using them
#
# SQLite (local runs, file-backed URL such as sqlite:///./shop.db):
# - regular pool, one connection per session, so a checkout
#   owns its transaction
# - busy timeout so writers queue instead of failing
# - foreign keys enforced, as on Postgres
# ---------------------------------------------------------

db_url = settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 5,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **overrides):
    """
    Create an engine for `url` with the settings above.

    `overrides` are passed to `create_engine` on top of the defaults
    (tests use this to pin an in-memory database to one connection).
    """
    kwargs = _engine_kwargs(url)
    kwargs.update(overrides)
    new_engine = create_engine(
        url,
        echo=False,        # set to True if you want to debug SQL queries
        **kwargs,
    )
    if url.startswith("sqlite"):
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


if db_url.startswith("postgres") and "sslmode=" not in db_url:
    if "?" in db_url:
        db_url = db_url + "&sslmode=require"
    else:
        db_url = db_url + "?sslmode=require"

engine = build_engine(db_url)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    The session is the transaction scope for a request: repositories
    receive it explicitly and never commit on their own when they take
    part in a multi-step workflow. Closing the session rolls back
    anything left uncommitted (e.g. after a client disconnect).

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
