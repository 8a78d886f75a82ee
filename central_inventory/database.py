"""
Database configuration and session management for the Central Inventory service.

This module sets up the database connection using SQLAlchemy. The engine and
session factory live on an explicitly constructed Database handle, which the
application creates at startup and disposes at shutdown.
"""
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


class Database:
    """
    Handle owning the SQLAlchemy engine and session factory.

    Args:
        url: SQLAlchemy database URL
        busy_timeout: Seconds a SQLite connection waits on a locked database
        pool_size: Pool size for server databases (ignored for SQLite)
    """

    def __init__(self, url: str, busy_timeout: float = 30.0, pool_size: int = 5):
        self.url = url
        if url.startswith("sqlite"):
            # Route handlers run on a thread pool, so connections hop threads
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False, "timeout": busy_timeout},
            )
        else:
            self.engine = create_engine(url, pool_size=pool_size, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create the inventory and reservation tables if they do not exist."""
        # Register the mapped classes on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready")

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database connections disposed")

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        """
        Check that the database answers a trivial query.

        Returns:
            True if the database is reachable, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    Yields:
        Session: SQLAlchemy database session bound to the app's Database handle

    Usage:
        Use as a FastAPI dependency to inject database sessions into route handlers.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
