"""
Database Configuration

Backs the local persistent store. Supports both SQLite (development)
and PostgreSQL (production).
"""
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import Settings


# Base class for models
Base = declarative_base()


def create_engine_for(settings: Settings):
    """Create an engine for the configured DATABASE_URL"""
    url = settings.DATABASE_URL

    if settings.is_sqlite:
        # Create database directory for file-backed SQLite
        if url not in ("sqlite://", "sqlite:///:memory:"):
            db_path = Path(url.replace("sqlite:///", ""))
            db_path.parent.mkdir(parents=True, exist_ok=True)

        # SQLite configuration (for development)
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.DEBUG
        )

    # PostgreSQL configuration (for production)
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        echo=settings.DEBUG
    )


def create_session_factory(engine):
    """Session factory bound to an engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine):
    """Initialize the database (create all tables)"""
    # Import models to register them with Base
    from inverland.stores.local import LocalStoreEntry  # noqa: F401

    Base.metadata.create_all(bind=engine)
