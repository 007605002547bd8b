"""
Persistence backends.

Every backend implements the same byte-oriented key-value contract. The
credential store layers JSON encoding, timeouts and error mapping on top, so
the backends stay small and the rate-limit logic never knows which one is in
use. A backend is picked once, at startup, by ``create_persistence``.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

import aiofiles
import aiofiles.os
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings
from app.db.session import build_engine, build_sessionmaker, close_db, init_db
from app.models.kv_entry import KVEntry

logger = logging.getLogger(__name__)


class Persistence(ABC):
    """Byte-oriented key-value store with read-after-write visibility."""

    name: str = "abstract"

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes) -> bool:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key. Returns False if it did not exist."""

    async def initialize(self) -> None:
        """Prepare the backend (create directories, tables, ...)."""

    async def close(self) -> None:
        """Release backend resources."""


class MemoryPersistence(Persistence):
    """Process-local dictionary. Used for development and tests."""

    name = "memory"

    def __init__(self):
        self._data: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


class JsonFilePersistence(Persistence):
    """
    One JSON file per key inside a data directory.

    Writes go to a temporary file first and are moved into place, so a reader
    never sees a half-written document.
    """

    name = "json"

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    async def initialize(self) -> None:
        os.makedirs(self.directory, exist_ok=True)
        logger.info(f"Storage: JSON files in {self.directory}")

    async def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def set(self, key: str, value: bytes) -> bool:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        async with aiofiles.open(tmp_path, "wb") as f:
            await f.write(value)
        await aiofiles.os.replace(tmp_path, path)
        return True

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not await aiofiles.os.path.exists(path):
            return False
        await aiofiles.os.remove(path)
        return True


class SqlPersistence(Persistence):
    """Key-value table accessed through SQLAlchemy's async ORM."""

    name = "database"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessions = build_sessionmaker(engine)

    async def initialize(self) -> None:
        await init_db(self.engine)

    async def close(self) -> None:
        await close_db(self.engine)
        logger.info("Database connections closed")

    async def get(self, key: str) -> Optional[bytes]:
        async with self._sessions() as session:
            entry = await session.get(KVEntry, key)
            return entry.value if entry else None

    async def set(self, key: str, value: bytes) -> bool:
        async with self._sessions() as session:
            await session.merge(KVEntry(key=key, value=value))
            await session.commit()
        return True

    async def delete(self, key: str) -> bool:
        async with self._sessions() as session:
            result = await session.execute(delete(KVEntry).where(KVEntry.key == key))
            await session.commit()
            return result.rowcount > 0


def create_persistence(settings: Settings) -> Persistence:
    """Select the storage backend named in settings."""
    backend = settings.normalized_storage_backend

    if backend == "memory":
        return MemoryPersistence()
    if backend == "json":
        return JsonFilePersistence(settings.data_dir)
    if backend == "database":
        return SqlPersistence(build_engine(settings.database_url, echo=False))

    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
