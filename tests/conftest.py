import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

import db


@pytest.fixture(autouse=True)
async def store(tmp_path, monkeypatch):
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "mingle-test.sqlite3"))
    await db.init_db()


@pytest.fixture
def make_state():
    storage = MemoryStorage()

    def _make(user_id: int) -> FSMContext:
        return FSMContext(storage=storage, key=StorageKey(bot_id=42, chat_id=user_id, user_id=user_id))

    return _make


@pytest.fixture
def register():
    """Insert a finished profile (user + preferences) straight into the store."""

    async def _register(
        user_id,
        name=None,
        age=25,
        gender="female",
        looking_for="both",
        min_age=18,
        max_age=99,
        created_at=1000,
        is_active=True,
    ):
        await db.insert_user(
            user_id,
            name=name or f"user{user_id}",
            age=age,
            gender=gender,
            bio=None,
            location=None,
            is_active=is_active,
            created_at=created_at,
        )
        await db.insert_preferences(
            user_id, looking_for_gender=looking_for, min_age=min_age, max_age=max_age
        )

    return _register
