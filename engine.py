# Ядро диалога: одно входящее событие -> список исходящих сообщений.
# Маршрутизацию делает aiogram в bot.py, здесь только логика хэндлеров.

import asyncio
import functools
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple

from aiogram.fsm.context import FSMContext

import onboarding
import texts
from config import NEXT_PROFILE_DELAY, logger
from db import find_swipe, get_preferences, get_user, list_matches_for_user
from keyboards import main_menu, swipe_inline_kb
from matching import LIKE, PASS, evaluate_like, next_candidate, record_swipe

# ошибки хранилища; aiosqlite пробрасывает исключения sqlite3 как есть
STORE_ERRORS = (sqlite3.Error,)


@dataclass
class Outgoing:
    target_id: int
    text: str
    reply_markup: Any = None


@dataclass
class CallbackResult:
    ack_text: str = ""
    messages: List[Outgoing] = field(default_factory=list)
    follow_up: bool = False


Send = Callable[[Outgoing], Awaitable[None]]
Step = Callable[[int, str, FSMContext], Awaitable[onboarding.StepResult]]

_follow_ups: Set[asyncio.Task] = set()


def store_guard(handler):
    # сбой хранилища: пишем в лог, пользователю общий ответ
    @functools.wraps(handler)
    async def wrapper(user_id: int, chat_id: int, *args, **kwargs) -> List[Outgoing]:
        try:
            return await handler(user_id, chat_id, *args, **kwargs)
        except STORE_ERRORS as e:
            logger.exception(f"Ошибка хранилища в {handler.__name__} для {user_id}: {e}")
            return [Outgoing(chat_id, texts.SOMETHING_WRONG)]

    return wrapper


def parse_swipe_payload(payload: str) -> Optional[Tuple[str, int]]:
    action, sep, raw_id = (payload or "").partition("_")
    if not sep or action not in (LIKE, PASS):
        return None
    try:
        return action, int(raw_id)
    except ValueError:
        return None


# -------- Команды --------

@store_guard
async def cmd_start(user_id: int, chat_id: int, state: FSMContext) -> List[Outgoing]:
    user = await get_user(user_id)
    if user:
        await state.clear()
        return [Outgoing(chat_id, texts.welcome_back(user["name"]), main_menu())]
    step = await onboarding.begin(state)
    return [Outgoing(chat_id, step.text, step.reply_markup)]


@store_guard
async def cmd_profile(user_id: int, chat_id: int) -> List[Outgoing]:
    user = await get_user(user_id)
    if not user:
        return [Outgoing(chat_id, texts.REGISTER_FIRST)]
    return [Outgoing(chat_id, texts.own_profile(user))]


@store_guard
async def browse(user_id: int, chat_id: int) -> List[Outgoing]:
    user = await get_user(user_id)
    if not user:
        return [Outgoing(chat_id, texts.REGISTER_FIRST)]
    profile = await next_candidate(user_id)
    if not profile:
        return [Outgoing(chat_id, texts.NO_PROFILES)]
    return [Outgoing(chat_id, texts.candidate_card(profile), swipe_inline_kb(profile["user_id"]))]


@store_guard
async def cmd_matches(user_id: int, chat_id: int) -> List[Outgoing]:
    matches = await list_matches_for_user(user_id)
    if not matches:
        return [Outgoing(chat_id, texts.NO_MATCHES)]
    partners = []
    for m in matches:
        partner_id = m["user2_id"] if m["user1_id"] == user_id else m["user1_id"]
        partner = await get_user(partner_id)
        if partner:
            partners.append(partner)
    return [Outgoing(chat_id, texts.matches_list(partners, len(matches)))]


@store_guard
async def cmd_settings(user_id: int, chat_id: int) -> List[Outgoing]:
    prefs = await get_preferences(user_id)
    if not prefs:
        return [Outgoing(chat_id, texts.REGISTER_FIRST)]
    return [Outgoing(chat_id, texts.settings_summary(prefs))]


# -------- Анкета --------

@store_guard
async def onboarding_answer(
    user_id: int,
    chat_id: int,
    text: Optional[str],
    state: FSMContext,
    step: Step,
) -> List[Outgoing]:
    result = await step(user_id, text or "", state)
    return [Outgoing(chat_id, result.text, result.reply_markup)]


# -------- Лайк / пропуск --------

async def handle_callback(
    user_id: int,
    query_id: str,
    payload: str,
    first_name: Optional[str] = None,
) -> CallbackResult:
    parsed = parse_swipe_payload(payload)
    if not parsed:
        logger.debug(f"Неизвестный callback {payload!r} от {user_id} (query {query_id})")
        return CallbackResult()
    action, swiped_id = parsed

    try:
        recorded = await record_swipe(user_id, swiped_id, action)
        # старая кнопка: по этой анкете уже принято другое решение
        if not recorded and not await find_swipe(user_id, swiped_id, action):
            return CallbackResult(texts.ACK_ALREADY_SWIPED)
        if action == PASS:
            return CallbackResult(texts.ACK_PASSED, follow_up=recorded)

        match = await evaluate_like(user_id, swiped_id)
        if not match:
            return CallbackResult(texts.ACK_LIKED, follow_up=recorded)

        me = await get_user(user_id)
        other = await get_user(swiped_id)
        my_name = (me or {}).get("name") or first_name or texts.SOMEONE
        other_name = (other or {}).get("name") or texts.SOMEONE
        return CallbackResult(
            texts.ACK_MATCH,
            messages=[
                Outgoing(user_id, texts.its_a_match(other_name)),
                Outgoing(swiped_id, texts.its_a_match(my_name)),
            ],
            follow_up=True,
        )
    except STORE_ERRORS as e:
        logger.exception(f"Ошибка хранилища при свайпе {user_id} -> {swiped_id}: {e}")
        return CallbackResult(texts.SOMETHING_WRONG)


# -------- Следующая анкета после свайпа --------

async def _show_next_later(user_id: int, send: Send, delay: float) -> None:
    await asyncio.sleep(delay)
    try:
        await send(Outgoing(user_id, texts.LOADING_NEXT))
        for out in await browse(user_id, user_id):
            await send(out)
    except Exception as e:
        logger.exception(f"Не удалось показать следующую анкету пользователю {user_id}: {e}")


def schedule_next_profile(user_id: int, send: Send, delay: float = NEXT_PROFILE_DELAY) -> asyncio.Task:
    task = asyncio.create_task(_show_next_later(user_id, send, delay))
    _follow_ups.add(task)
    task.add_done_callback(_follow_ups.discard)
    return task
