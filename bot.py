#Основа: транспорт Telegram поверх engine

import asyncio
from functools import partial
from typing import List

from aiogram import Bot, Dispatcher, F
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.memory import MemoryStorage, SimpleEventIsolation
from aiogram.types import CallbackQuery, ErrorEvent, Message

import engine
import onboarding
from config import logger, require_bot_token
from db import init_db
from keyboards import BTN_BROWSE, BTN_MATCHES, BTN_PROFILE, BTN_SETTINGS
from onboarding import OnboardingFSM

# сессии анкеты живут в памяти и теряются при перезапуске;
# апдейты одного пользователя обрабатываются строго по очереди
dp = Dispatcher(storage=MemoryStorage(), events_isolation=SimpleEventIsolation())

# ответ на шаге анкеты: любой текст, кроме команд
ANSWER = (F.text, ~F.text.startswith("/"))


async def deliver(bot: Bot, out: engine.Outgoing) -> None:
    try:
        await bot.send_message(chat_id=out.target_id, text=out.text, reply_markup=out.reply_markup)
    except TelegramAPIError as e:
        logger.warning(f"Не удалось отправить сообщение пользователю {out.target_id}: {e}")


async def deliver_all(bot: Bot, replies: List[engine.Outgoing]) -> None:
    for out in replies:
        await deliver(bot, out)


# =========================
# Команды
# =========================

@dp.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    await deliver_all(message.bot, await engine.cmd_start(message.from_user.id, message.chat.id, state))


@dp.message(Command("profile"))
async def cmd_profile(message: Message):
    await deliver_all(message.bot, await engine.cmd_profile(message.from_user.id, message.chat.id))


@dp.message(Command("browse"))
async def cmd_browse(message: Message):
    await deliver_all(message.bot, await engine.browse(message.from_user.id, message.chat.id))


@dp.message(Command("matches"))
async def cmd_matches(message: Message):
    await deliver_all(message.bot, await engine.cmd_matches(message.from_user.id, message.chat.id))


@dp.message(Command("settings"))
async def cmd_settings(message: Message):
    await deliver_all(message.bot, await engine.cmd_settings(message.from_user.id, message.chat.id))


# =========================
# Анкета: мастер создания
# =========================

async def _answer_step(message: Message, state: FSMContext, step: engine.Step) -> None:
    replies = await engine.onboarding_answer(message.from_user.id, message.chat.id, message.text, state, step)
    await deliver_all(message.bot, replies)


@dp.message(OnboardingFSM.age, *ANSWER)
async def fsm_age(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_age)


@dp.message(OnboardingFSM.name, *ANSWER)
async def fsm_name(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_name)


@dp.message(OnboardingFSM.gender, *ANSWER)
async def fsm_gender(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_gender)


@dp.message(OnboardingFSM.bio, *ANSWER)
async def fsm_bio(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_bio)


@dp.message(OnboardingFSM.location, *ANSWER)
async def fsm_location(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_location)


@dp.message(OnboardingFSM.looking_for, *ANSWER)
async def fsm_looking_for(message: Message, state: FSMContext):
    await _answer_step(message, state, onboarding.step_looking_for)


# Кнопки меню регистрируются после шагов анкеты: во время анкеты текст кнопки считается ответом
dp.message.register(cmd_browse, F.text == BTN_BROWSE)
dp.message.register(cmd_matches, F.text == BTN_MATCHES)
dp.message.register(cmd_profile, F.text == BTN_PROFILE)
dp.message.register(cmd_settings, F.text == BTN_SETTINGS)


# =========================
# Лайк / пропуск
# =========================

@dp.callback_query(F.data.startswith("like_") | F.data.startswith("pass_"))
async def on_swipe(call: CallbackQuery):
    user_id = call.from_user.id
    result = await engine.handle_callback(user_id, call.id, call.data, call.from_user.first_name)
    try:
        await call.answer(result.ack_text or None)
    except TelegramAPIError as e:
        logger.warning(f"Не удалось ответить на callback {call.id}: {e}")

    if result.follow_up and isinstance(call.message, Message):
        # убираем кнопки с уже оцененной анкеты
        try:
            await call.message.edit_reply_markup(reply_markup=None)
        except TelegramAPIError as e:
            logger.debug(f"Не удалось убрать кнопки с анкеты: {e}")

    await deliver_all(call.bot, result.messages)

    if result.follow_up:
        engine.schedule_next_profile(user_id, partial(deliver, call.bot))


@dp.errors()
async def on_error(event: ErrorEvent):
    logger.error(f"Необработанная ошибка в хэндлере: {event.exception}", exc_info=event.exception)
    return True


# =========================
# Запуск
# =========================

async def main():
    bot = Bot(require_bot_token())
    await init_db()
    logger.info("🤖 Mingle Bot is running...")
    try:
        await dp.start_polling(bot, allowed_updates=["message", "callback_query"])
    finally:
        await bot.session.close()


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Бот остановлен.")


if __name__ == "__main__":
    run()
