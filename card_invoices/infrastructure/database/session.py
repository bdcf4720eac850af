"""Database session management with connection pooling"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from card_invoices.config import settings

_engine = None
_SessionLocal = None


def get_engine():
    """Create the SQLAlchemy engine on first use"""
    global _engine
    if _engine is None:
        options = {"pool_pre_ping": True, "echo": settings.sql_echo}
        if not settings.database_url.startswith("sqlite"):
            # Recycle pooled connections to avoid stale ones
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=settings.db_pool_recycle_seconds,
            )
        _engine = create_engine(settings.database_url, **options)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
