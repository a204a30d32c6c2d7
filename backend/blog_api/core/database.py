from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from blog_api.core.config import settings


def build_engine(database_url: str):
    """
    Create the database engine for a connection string.

    SQLite needs check_same_thread disabled because FastAPI may serve a request
    from a different thread than the one that opened the connection. An
    in-memory SQLite database only lives as long as its connection, so it is
    pinned to a single shared connection.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    # Server databases drop idle connections; test each one before handing it out
    return create_engine(database_url, pool_pre_ping=True)


# Process-wide engine - manages the connection pool
engine = build_engine(settings.DATABASE_URL)

# Each request gets its own session from this factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all database models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session.

    The session is closed after the request completes, even if the handler
    raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
