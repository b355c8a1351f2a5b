# artistconnect/database.py
from sqlmodel import SQLModel, create_engine, Session

from artistconnect.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Client storage connection
#
# The client storage table is the server-side stand-in for the browser's
# localStorage / sessionStorage. It is owned by the storefront only; all
# marketplace data lives in the Supabase project and is reached through
# the commerce client.
#
# - SQLite (default): check_same_thread=False because FastAPI runs sync
#   endpoints in a threadpool.
# - Postgres: keep the pool small, same as the other services sharing
#   the Supabase pooler.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
