"""
SQLAlchemy engine and declarative base for the relational storage backend.
"""

from .connection import Base, SessionLocal, engine, init_db

__all__ = ["Base", "SessionLocal", "engine", "init_db"]
