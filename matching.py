# Подбор кандидатов, свайпы и взаимные лайки

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Tuple

from config import logger
from db import (
    canonical_pair,
    find_swipe,
    get_preferences,
    insert_match,
    insert_swipe,
    list_active_users_in_age_range,
    list_swiped_ids,
)

LIKE = "like"
PASS = "pass"
SWIPE_ACTIONS = (LIKE, PASS)

# блокировки на неупорядоченную пару, чтобы проверка+создание матча шли по одному;
# запись живет, пока пару кто-то держит или ждет
_pair_locks: Dict[Tuple[int, int], asyncio.Lock] = {}
_pair_users: Dict[Tuple[int, int], int] = {}


@asynccontextmanager
async def pair_lock(id_a: int, id_b: int) -> AsyncIterator[None]:
    key = canonical_pair(id_a, id_b)
    lock = _pair_locks.get(key)
    if lock is None:
        lock = _pair_locks[key] = asyncio.Lock()
    _pair_users[key] = _pair_users.get(key, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _pair_users[key] -= 1
        if not _pair_users[key]:
            del _pair_users[key]
            del _pair_locks[key]


def gender_accepted(looking_for_gender: str, candidate_gender: Optional[str]) -> bool:
    if looking_for_gender == "both":
        return True
    return candidate_gender == looking_for_gender


async def next_candidate(user_id: int) -> Optional[Dict[str, Any]]:
    prefs = await get_preferences(user_id)
    if not prefs:
        return None

    excluded = set(await list_swiped_ids(user_id))
    excluded.add(user_id)

    profiles = await list_active_users_in_age_range(
        prefs["min_age"], prefs["max_age"], excluding=excluded, limit=1
    )
    if not profiles:
        return None
    profile = profiles[0]
    # пол проверяется только у первой анкеты, второй запрос не делаем
    if gender_accepted(prefs["looking_for_gender"], profile.get("gender")):
        return profile
    logger.debug(
        f"Кандидат {profile['user_id']} отброшен по полу для {user_id} "
        f"(ищет {prefs['looking_for_gender']}, пол {profile.get('gender')})"
    )
    return None


async def record_swipe(swiper_id: int, swiped_id: int, action: str) -> bool:
    if action not in SWIPE_ACTIONS:
        raise ValueError(f"unknown swipe action: {action!r}")
    stored = await insert_swipe(swiper_id, swiped_id, action)
    if not stored:
        logger.info(f"Повторный свайп {swiper_id} -> {swiped_id} ({action}) проигнорирован")
    return stored


async def evaluate_like(liker_id: int, liked_id: int) -> Optional[Dict[str, Any]]:
    # вызывать после record_swipe(liker_id, liked_id, "like");
    # матч возвращается только второму из двух взаимных лайков
    if liker_id == liked_id:
        return None
    async with pair_lock(liker_id, liked_id):
        liked = await find_swipe(liker_id, liked_id, LIKE)
        liked_back = await find_swipe(liked_id, liker_id, LIKE)
        if not (liked and liked_back):
            return None
        match = await insert_match(liker_id, liked_id)
    if match:
        logger.info(f"Новый матч {match['user1_id']} <-> {match['user2_id']}")
    return match
