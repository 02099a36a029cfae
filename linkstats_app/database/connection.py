from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from linkstats_app.config import settings


def create_db_engine(database_url: str):
    """Create an engine; SQLite needs cross-thread access for FastAPI's thread pool."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Create tables for every registered model."""
    # Import models to ensure they're registered with Base
    from linkstats_app.models import URL, Click  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
