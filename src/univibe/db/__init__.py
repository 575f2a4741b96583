# src/univibe/db/__init__.py
"""Database engine, session factory and table helpers."""

from .session import Base, SessionLocal, create_tables, drop_tables, get_db

__all__ = ["Base", "SessionLocal", "create_tables", "drop_tables", "get_db"]
