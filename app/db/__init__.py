"""
Database configuration and models.
"""

from app.db.database import engine, SessionLocal, get_db, get_repository
from app.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_repository", "Base"]
