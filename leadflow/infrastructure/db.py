"""Database infrastructure setup."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from leadflow.infrastructure.config.settings import settings
from leadflow.infrastructure.logging.logger import logger

# Engine creation is deferred until an adapter first opens a session
_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required for database operations")
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.debug_mode,
        )
    return _engine


def get_db_session() -> Session:
    """
    Get a database session.

    Returns:
        SQLAlchemy session instance
    """
    global _SessionLocal
    if _SessionLocal is None:
        engine = _get_engine()
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _SessionLocal()


@contextmanager
def session_scope(action: str) -> Iterator[Session]:
    """
    Open a session for one repository operation.

    Any exception rolls the session back before it propagates. Database
    errors are also logged. The session is always closed. Committing stays
    with the caller.

    Args:
        action: What the operation does, for the error log (e.g. "updating lead 3")

    Yields:
        SQLAlchemy session instance
    """
    db = get_db_session()
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while {action}: {str(e)}")
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
