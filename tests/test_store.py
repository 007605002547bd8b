"""
Tests for persistence backends and the credential store.

Run with: pytest tests/test_store.py -v
"""

import asyncio
from typing import Optional

import pytest

from app.core.config import Settings
from app.core.exceptions import InfrastructureError, NotFoundError
from app.db import (
    JsonFilePersistence,
    MemoryPersistence,
    Persistence,
    SqlPersistence,
    build_engine,
    create_persistence,
)
from app.models.question import Question
from app.models.user import User
from app.services.store_service import CredentialStore


async def _exercise(persistence: Persistence):
    assert await persistence.get("enigma:missing") is None

    assert await persistence.set("enigma:config", b'{"a": 1}') is True
    assert await persistence.get("enigma:config") == b'{"a": 1}'

    await persistence.set("enigma:config", b'{"a": 2}')
    assert await persistence.get("enigma:config") == b'{"a": 2}'

    assert await persistence.delete("enigma:config") is True
    assert await persistence.delete("enigma:config") is False
    assert await persistence.get("enigma:config") is None


class SlowPersistence(MemoryPersistence):
    async def get(self, key: str) -> Optional[bytes]:
        await asyncio.sleep(1)
        return None


class BrokenPersistence(MemoryPersistence):
    async def get(self, key: str) -> Optional[bytes]:
        raise ConnectionError("backend down")

    async def set(self, key: str, value: bytes) -> bool:
        return False


class TestBackends:
    """The same contract holds for every backend."""

    @pytest.mark.asyncio
    async def test_memory(self):
        await _exercise(MemoryPersistence())

    @pytest.mark.asyncio
    async def test_json_files(self, tmp_path):
        persistence = JsonFilePersistence(str(tmp_path / "data"))
        await persistence.initialize()

        await _exercise(persistence)

        await persistence.set("enigma:user:user-1234abcd", b"{}")
        assert (tmp_path / "data" / "enigma%3Auser%3Auser-1234abcd.json").exists()
        assert not list((tmp_path / "data").glob("*.tmp"))

    @pytest.mark.asyncio
    async def test_sql(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}")
        persistence = SqlPersistence(engine)
        await persistence.initialize()
        try:
            await _exercise(persistence)
        finally:
            await persistence.close()

    def test_create_persistence_selects_backend(self, tmp_path):
        assert isinstance(create_persistence(Settings(storage_backend="memory", _env_file=None)), MemoryPersistence)
        assert isinstance(
            create_persistence(Settings(storage_backend="JSON", data_dir=str(tmp_path), _env_file=None)),
            JsonFilePersistence,
        )

    def test_create_persistence_rejects_unknown(self):
        with pytest.raises(ValueError):
            create_persistence(Settings(storage_backend="redis", _env_file=None))


class TestCredentialStoreFailures:
    """Backend problems surface as InfrastructureError."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        store = CredentialStore(SlowPersistence(), timeout_seconds=0.05)

        with pytest.raises(InfrastructureError):
            await store.get_config()

    @pytest.mark.asyncio
    async def test_backend_exception(self):
        store = CredentialStore(BrokenPersistence())

        with pytest.raises(InfrastructureError):
            await store.get_user("user-abcdefgh")

    @pytest.mark.asyncio
    async def test_rejected_write(self):
        store = CredentialStore(BrokenPersistence())

        with pytest.raises(InfrastructureError):
            await store.save_user(User(id="user-abcdefgh", name="Ada"))

    @pytest.mark.asyncio
    async def test_corrupt_record(self):
        persistence = MemoryPersistence()
        await persistence.set("enigma:user:user-abcdefgh", b"not json")
        store = CredentialStore(persistence)

        with pytest.raises(InfrastructureError):
            await store.get_user("user-abcdefgh")


class TestCredentialStoreRecords:
    """Typed record access."""

    @pytest.mark.asyncio
    async def test_add_and_delete_user(self, store):
        user = User(id="user-abcdefgh", name="Ada")

        assert await store.add_user(user) is True
        assert await store.add_user(user) is False
        assert await store.list_user_ids() == ["user-abcdefgh"]

        assert await store.delete_user("user-abcdefgh") is True
        assert await store.delete_user("user-abcdefgh") is False
        assert await store.get_user("user-abcdefgh") is None
        assert await store.list_users() == []

    @pytest.mark.asyncio
    async def test_require_user(self, store):
        with pytest.raises(NotFoundError):
            await store.require_user("user-missing1")

    @pytest.mark.asyncio
    async def test_questions_sorted_by_order(self, store):
        await store.save_questions([
            Question(id="b", text="B", answer="b", order=2),
            Question(id="a", text="A", answer="a", order=1),
        ])

        assert [q.id for q in await store.get_questions()] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_rate_limit_defaults_without_config(self, store):
        config = await store.get_rate_limit_config()

        assert (config.answer.max_failures, config.answer.lock_minutes) == (3, 10)
        assert (config.hint_password.max_failures, config.hint_password.lock_minutes) == (3, 25)

    @pytest.mark.asyncio
    async def test_user_roundtrip_keeps_rate_limit_state(self, services, user_uuid):
        await services.engine.record_answer_failure(user_uuid)

        user = await services.store.get_user(user_uuid)

        assert user.rate_limit.answer_failures == 1
        assert user.last_activity == services.engine.clock()
