"""
Database Session
Provides database session factory for use in Celery tasks and scripts.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..config.settings import get_settings

settings = get_settings()

engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,  # Verify connections before using
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
