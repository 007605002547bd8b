"""
Credential Store: typed access to users, questions, config and hint routes.

Records are JSON documents stored under namespaced keys:

    <ns>:config            AdminConfig
    <ns>:questions         list of Question
    <ns>:users             list of user UUIDs (index)
    <ns>:user:<uuid>       one User
    <ns>:hint-routes       list of HintRoute

Each user lives under its own key so a rate-limit update rewrites a single
record. Every backend call is bounded by a timeout and any backend failure
surfaces as InfrastructureError.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import InfrastructureError, NotFoundError
from app.db.persistence import Persistence
from app.models.admin_config import AdminConfig, RateLimitConfig
from app.models.hint_route import HintRoute
from app.models.question import Question
from app.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_questions_adapter = TypeAdapter(List[Question])
_hint_routes_adapter = TypeAdapter(List[HintRoute])
_index_adapter = TypeAdapter(List[str])


class CredentialStore:
    """Typed store over a byte-oriented persistence backend."""

    def __init__(
        self,
        persistence: Persistence,
        namespace: str = "enigma",
        timeout_seconds: float = 5.0,
    ):
        self.persistence = persistence
        self.namespace = namespace
        self.timeout_seconds = timeout_seconds
        self._index_lock = asyncio.Lock()

    # ─── Raw access ─────────────────────────────
    def _key(self, *parts: str) -> str:
        return ":".join((self.namespace, *parts))

    async def _call(self, operation: str, key: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Store {operation} timed out after {self.timeout_seconds}s: {key}")
            raise InfrastructureError("Storage request timed out")
        except InfrastructureError:
            raise
        except Exception as exc:
            logger.error(f"Store {operation} failed for {key}: {type(exc).__name__}: {exc}")
            raise InfrastructureError() from exc

    async def _read(self, key: str) -> Optional[bytes]:
        return await self._call("get", key, self.persistence.get(key))

    async def _write(self, key: str, payload: bytes) -> None:
        ok = await self._call("set", key, self.persistence.set(key, payload))
        if not ok:
            logger.error(f"Store set rejected for {key}")
            raise InfrastructureError("Storage write failed")

    async def _remove(self, key: str) -> bool:
        return await self._call("delete", key, self.persistence.delete(key))

    @staticmethod
    def _decode(key: str, raw: bytes, parse) -> Any:
        try:
            return parse(raw)
        except (PydanticValidationError, ValueError) as exc:
            logger.error(f"Stored record {key} is corrupt: {exc}")
            raise InfrastructureError("Stored data is corrupt") from exc

    async def _read_model(self, key: str, model: Type[M]) -> Optional[M]:
        raw = await self._read(key)
        if raw is None:
            return None
        return self._decode(key, raw, model.model_validate_json)

    async def _write_model(self, key: str, record: BaseModel) -> None:
        await self._write(key, record.model_dump_json().encode("utf-8"))

    async def _read_list(self, key: str, adapter: TypeAdapter) -> list:
        raw = await self._read(key)
        if raw is None:
            return []
        return self._decode(key, raw, adapter.validate_json)

    async def _write_list(self, key: str, adapter: TypeAdapter, items: list) -> None:
        await self._write(key, adapter.dump_json(items))

    # ─── Config ─────────────────────────────────
    async def get_config(self) -> Optional[AdminConfig]:
        return await self._read_model(self._key("config"), AdminConfig)

    async def save_config(self, config: AdminConfig) -> None:
        await self._write_model(self._key("config"), config)

    async def get_rate_limit_config(self) -> RateLimitConfig:
        """Stored rate-limit policy, or the defaults when no config exists yet."""
        config = await self.get_config()
        return config.rate_limit_config if config else RateLimitConfig()

    # ─── Questions ──────────────────────────────
    async def get_questions(self) -> List[Question]:
        questions = await self._read_list(self._key("questions"), _questions_adapter)
        return sorted(questions, key=lambda q: q.order)

    async def save_questions(self, questions: List[Question]) -> None:
        ordered = sorted(questions, key=lambda q: q.order)
        await self._write_list(self._key("questions"), _questions_adapter, ordered)

    # ─── Users ──────────────────────────────────
    async def list_user_ids(self) -> List[str]:
        return await self._read_list(self._key("users"), _index_adapter)

    async def get_user(self, uuid: str) -> Optional[User]:
        return await self._read_model(self._key("user", uuid), User)

    async def require_user(self, uuid: str) -> User:
        user = await self.get_user(uuid)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self) -> List[User]:
        users = []
        for uuid in await self.list_user_ids():
            user = await self.get_user(uuid)
            if user is not None:
                users.append(user)
        return users

    async def save_user(self, user: User) -> None:
        """Overwrite an existing user record."""
        await self._write_model(self._key("user", user.id), user)

    async def add_user(self, user: User) -> bool:
        """Insert a new user. Returns False if the UUID is already taken."""
        async with self._index_lock:
            index = await self.list_user_ids()
            if user.id in index:
                return False
            await self._write_model(self._key("user", user.id), user)
            index.append(user.id)
            await self._write_list(self._key("users"), _index_adapter, index)
        return True

    async def delete_user(self, uuid: str) -> bool:
        async with self._index_lock:
            index = await self.list_user_ids()
            if uuid not in index:
                return False
            index.remove(uuid)
            await self._write_list(self._key("users"), _index_adapter, index)
            await self._remove(self._key("user", uuid))
        return True

    # ─── Hint routes ────────────────────────────
    async def get_hint_routes(self) -> List[HintRoute]:
        return await self._read_list(self._key("hint-routes"), _hint_routes_adapter)

    async def save_hint_routes(self, routes: List[HintRoute]) -> None:
        await self._write_list(self._key("hint-routes"), _hint_routes_adapter, routes)

    # ─── Lifecycle ──────────────────────────────
    async def initialize(self) -> None:
        await self._call("initialize", "*", self.persistence.initialize())

    async def close(self) -> None:
        await self.persistence.close()

    def describe(self) -> str:
        return f"{self.persistence.name} (namespace={self.namespace})"
