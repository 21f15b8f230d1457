"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration from DATABASE_URL (SQLite by default)
- Session factory for dependency injection
- Connectivity check used by the health endpoint

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/invoices")
     def list_invoices(db: Session = Depends(get_session)):
          return db.query(Invoice).all()
"""
import logging
import os
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./gems_billing.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"  # Log SQL if SQL_ECHO=true


def build_engine(url: str = DATABASE_URL, **kwargs):
     """
     Create the SQLAlchemy engine for a URL.

     SQLite connections are shared across FastAPI's worker threads, so the
     same-thread check is disabled; other backends get a recycled pool.
     """
     if url.startswith("sqlite"):
          kwargs.setdefault("connect_args", {"check_same_thread": False})
     else:
          kwargs.setdefault("pool_size", 5)
          kwargs.setdefault("max_overflow", 10)
          kwargs.setdefault("pool_timeout", 30)
          kwargs.setdefault("pool_recycle", 1800)  # Recycle connections after 30 minutes
     return create_engine(url, echo=SQL_ECHO, **kwargs)


engine = build_engine()

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db(bind=None) -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=bind or engine)


def check_connection(session: Session) -> bool:
     """
     Test database connectivity through a session.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          session.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError as e:
          logger.error("Database connection failed: %s", e)
          return False
