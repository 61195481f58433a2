"""
citation_db.database — Relational database engine and session management.

SQLAlchemy engine plus a session factory, built once per process from
DATABASE_URL. In development every emitted SQL statement is echoed;
elsewhere only errors reach the log.

Usage:
    from citation_db import get_database

    with get_database().session() as session:
        session.add(obj)
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from aws_lambda_powertools import Logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from citation_db.config import BackendSettings, load_env_files
from citation_db.exceptions import ConfigurationError

logger = Logger(service="citation-db")

# Base class for ORM models declared by the application
Base = declarative_base()


class Database:
    """Database engine and session manager."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        self.engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,  # Verify connections before handing them out
            pool_recycle=3600,
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session; commit on success, roll back and re-raise on error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        """Round-trip a trivial query. Raises on connection failure."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()


# Global database instance (initialized on first use)
_db_instance: Database | None = None


def get_database() -> Database:
    """Get or create the process-wide Database from DATABASE_URL."""
    global _db_instance
    if _db_instance is None:
        load_env_files()
        settings = BackendSettings.from_env()
        if not settings.database_url:
            raise ConfigurationError("DATABASE_URL must be set")

        url = make_url(settings.database_url)
        logger.info(
            "Initialising database connection",
            target=url.render_as_string(hide_password=True),
            environment=settings.environment,
            echo=settings.is_development,
        )
        _db_instance = Database(settings.database_url, echo=settings.is_development)
    return _db_instance


def reset_database() -> None:
    """Dispose the shared engine and clear the singleton."""
    global _db_instance
    if _db_instance is not None:
        _db_instance.dispose()
    _db_instance = None
