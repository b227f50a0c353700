#Управление БД

import time
from typing import Any, Collection, Dict, List, Optional

import aiosqlite

from config import DB_PATH

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    age INTEGER NOT NULL,
    gender TEXT NOT NULL, -- 'male' 'female' 'other' (free text, lower-cased)
    bio TEXT,
    location TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at INTEGER
);

CREATE TABLE IF NOT EXISTS preferences (
    user_id INTEGER PRIMARY KEY REFERENCES users(user_id),
    looking_for_gender TEXT NOT NULL, -- 'male' 'female' 'both'
    min_age INTEGER NOT NULL,
    max_age INTEGER NOT NULL,
    CHECK (min_age <= max_age)
);

CREATE TABLE IF NOT EXISTS swipes (
    swiper_id INTEGER NOT NULL,
    swiped_id INTEGER NOT NULL,
    action TEXT NOT NULL, -- 'like' or 'pass'
    created_at INTEGER,
    PRIMARY KEY (swiper_id, swiped_id)
);

CREATE TABLE IF NOT EXISTS matches (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user1_id INTEGER NOT NULL, -- всегда меньший id
    user2_id INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at INTEGER,
    UNIQUE (user1_id, user2_id),
    CHECK (user1_id < user2_id)
);
"""

def now_ts() -> int:
    return int(time.time())


def canonical_pair(id_a: int, id_b: int) -> tuple:
    # в таблице matches меньший id всегда первым
    if id_a == id_b:
        raise ValueError(f"cannot pair user {id_a} with themselves")
    return (id_a, id_b) if id_a < id_b else (id_b, id_a)


async def init_db() -> None:
    async with aiosqlite.connect(DB_PATH) as db:
        await db.executescript(CREATE_TABLES_SQL)
        await db.commit()


async def get_user(user_id: int) -> Optional[Dict[str, Any]]:
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        cur = await db.execute("SELECT * FROM users WHERE user_id = ?", (user_id,))
        row = await cur.fetchone()
    return dict(row) if row else None


async def get_preferences(user_id: int) -> Optional[Dict[str, Any]]:
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        cur = await db.execute("SELECT * FROM preferences WHERE user_id = ?", (user_id,))
        row = await cur.fetchone()
    return dict(row) if row else None


async def list_active_users_in_age_range(
    min_age: int,
    max_age: int,
    excluding: Collection[int] = (),
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    # сначала те, кто зарегистрировался раньше
    excluded = list(excluding)
    sql = "SELECT * FROM users WHERE is_active = 1 AND age BETWEEN ? AND ?"
    params: List[Any] = [min_age, max_age]
    if excluded:
        sql += f" AND user_id NOT IN ({', '.join('?' for _ in excluded)})"
        params.extend(excluded)
    sql += " ORDER BY created_at ASC, user_id ASC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        cur = await db.execute(sql, params)
        rows = await cur.fetchall()
    return [dict(r) for r in rows]


async def _insert_user(db: aiosqlite.Connection, user_id: int, fields: Dict[str, Any]) -> None:
    await db.execute(
        """
        INSERT INTO users (user_id, name, age, gender, bio, location, is_active, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            fields["name"],
            fields["age"],
            fields["gender"],
            fields.get("bio"),
            fields.get("location"),
            1 if fields.get("is_active", True) else 0,
            fields.get("created_at", now_ts()),
        ),
    )


async def _insert_preferences(db: aiosqlite.Connection, user_id: int, fields: Dict[str, Any]) -> None:
    await db.execute(
        """
        INSERT INTO preferences (user_id, looking_for_gender, min_age, max_age)
        VALUES (?, ?, ?, ?)
        """,
        (user_id, fields["looking_for_gender"], fields["min_age"], fields["max_age"]),
    )


async def insert_user(user_id: int, **fields) -> None:
    async with aiosqlite.connect(DB_PATH) as db:
        await _insert_user(db, user_id, fields)
        await db.commit()


async def insert_preferences(user_id: int, **fields) -> None:
    async with aiosqlite.connect(DB_PATH) as db:
        await _insert_preferences(db, user_id, fields)
        await db.commit()


async def create_profile(user_id: int, user: Dict[str, Any], preferences: Dict[str, Any]) -> None:
    # анкета и предпочтения пишутся одной транзакцией
    async with aiosqlite.connect(DB_PATH) as db:
        try:
            await _insert_user(db, user_id, user)
            await _insert_preferences(db, user_id, preferences)
        except aiosqlite.Error:
            await db.rollback()
            raise
        await db.commit()


async def insert_swipe(swiper_id: int, swiped_id: int, action: str) -> bool:
    # первое решение по паре остается, повторные свайпы игнорируются
    async with aiosqlite.connect(DB_PATH) as db:
        cur = await db.execute(
            "INSERT OR IGNORE INTO swipes (swiper_id, swiped_id, action, created_at) VALUES (?, ?, ?, ?)",
            (swiper_id, swiped_id, action, now_ts()),
        )
        await db.commit()
        return cur.rowcount > 0


async def list_swiped_ids(swiper_id: int) -> List[int]:
    async with aiosqlite.connect(DB_PATH) as db:
        cur = await db.execute("SELECT swiped_id FROM swipes WHERE swiper_id = ?", (swiper_id,))
        rows = await cur.fetchall()
    return [r[0] for r in rows]


async def find_swipe(swiper_id: int, swiped_id: int, action: Optional[str] = None) -> Optional[Dict[str, Any]]:
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        if action:
            cur = await db.execute(
                "SELECT * FROM swipes WHERE swiper_id = ? AND swiped_id = ? AND action = ?",
                (swiper_id, swiped_id, action),
            )
        else:
            cur = await db.execute(
                "SELECT * FROM swipes WHERE swiper_id = ? AND swiped_id = ?",
                (swiper_id, swiped_id),
            )
        row = await cur.fetchone()
    return dict(row) if row else None


async def insert_match(id_a: int, id_b: int) -> Optional[Dict[str, Any]]:
    # None, если у пары матч уже есть
    user1_id, user2_id = canonical_pair(id_a, id_b)
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        cur = await db.execute(
            "INSERT OR IGNORE INTO matches (user1_id, user2_id, is_active, created_at) VALUES (?, ?, 1, ?)",
            (user1_id, user2_id, now_ts()),
        )
        await db.commit()
        if cur.rowcount == 0:
            return None
        cur = await db.execute("SELECT * FROM matches WHERE id = ?", (cur.lastrowid,))
        row = await cur.fetchone()
    return dict(row) if row else None


async def list_matches_for_user(user_id: int) -> List[Dict[str, Any]]:
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        cur = await db.execute(
            """
            SELECT * FROM matches
            WHERE (user1_id = ? OR user2_id = ?) AND is_active = 1
            ORDER BY created_at ASC, id ASC
            """,
            (user_id, user_id),
        )
        rows = await cur.fetchall()
    return [dict(r) for r in rows]
