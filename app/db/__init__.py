"""
Database package: clean public API.

This makes `from app.db import Persistence, create_persistence` work and keeps
imports consistent across services and tests.
"""

from .session import (
    Base,
    build_engine,
    build_sessionmaker,
    init_db,
    close_db,
)
from .persistence import (
    Persistence,
    MemoryPersistence,
    JsonFilePersistence,
    SqlPersistence,
    create_persistence,
)

__all__ = [
    "Base",
    "build_engine",
    "build_sessionmaker",
    "init_db",
    "close_db",
    "Persistence",
    "MemoryPersistence",
    "JsonFilePersistence",
    "SqlPersistence",
    "create_persistence",
]
