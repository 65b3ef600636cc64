"""
Database configuration and session management for the review store.
"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config import get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite connections are shared with the threadpool FastAPI runs sync
    endpoints on, so the same-thread check is disabled for them.
    """
    connect_args: Dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=False,  # Set to True for SQL query logging in development
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def configure_database(database_url: str) -> Engine:
    """Rebind the engine and session factory to another database URL."""
    global engine
    engine = build_engine(database_url)
    SessionLocal.configure(bind=engine)
    return engine


# Base class for ORM models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Database session that is automatically closed after use
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Initialize the database by creating all tables.
    This should be called during application startup.
    """
    # Register models on the metadata before creating tables
    import app.models.review  # noqa: F401

    try:
        logger.info("Initializing database tables", database_url=engine.url.render_as_string(hide_password=True))
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise
