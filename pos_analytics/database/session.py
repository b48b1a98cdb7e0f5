import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from pos_analytics.database.engine import engine

logger = logging.getLogger(__name__)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db():
    """Request-scoped session; analytics routes only read through it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(factory=None):
    """Commit on success, roll back and re-raise on database errors."""
    db = (factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        logger.exception("Rolling back session after database error.")
        db.rollback()
        raise
    finally:
        db.close()


__all__ = ["SessionLocal", "get_db", "session_scope"]
