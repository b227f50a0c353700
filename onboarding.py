# Мастер создания анкеты: age -> name -> gender -> bio -> location -> looking_for
# Каждый шаг вызывается хэндлером с фильтром по своему состоянию OnboardingFSM.

from dataclasses import dataclass
from typing import Optional, Union

from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import ReplyKeyboardMarkup, ReplyKeyboardRemove

import texts
from config import DEFAULT_MAX_AGE, DEFAULT_MIN_AGE, MAX_AGE, MIN_AGE, logger
from db import create_profile
from keyboards import gender_keyboard, looking_for_keyboard, main_menu, remove_keyboard


class OnboardingFSM(StatesGroup):
    age = State()
    name = State()
    gender = State()
    bio = State()
    location = State()
    looking_for = State()


@dataclass
class StepResult:
    text: str
    reply_markup: Optional[Union[ReplyKeyboardMarkup, ReplyKeyboardRemove]] = None
    completed: bool = False


def parse_age(text: str) -> Optional[int]:
    try:
        age = int(text.strip())
    except ValueError:
        return None
    return age if MIN_AGE <= age <= MAX_AGE else None


def parse_looking_for(text: str) -> str:
    t = text.strip().lower()
    if t == "men":
        return "male"
    if t == "women":
        return "female"
    return "both"


async def begin(state: FSMContext) -> StepResult:
    await state.set_state(OnboardingFSM.age)
    await state.set_data({})
    return StepResult(texts.WELCOME_NEW, remove_keyboard())


async def step_age(user_id: int, text: str, state: FSMContext) -> StepResult:
    age = parse_age(text)
    if age is None:
        return StepResult(texts.ASK_AGE_AGAIN)
    await state.update_data(age=age)
    await state.set_state(OnboardingFSM.name)
    return StepResult(texts.ASK_NAME)


async def step_name(user_id: int, text: str, state: FSMContext) -> StepResult:
    if not text.strip():
        return StepResult(texts.ASK_NAME_AGAIN)
    await state.update_data(name=text)
    await state.set_state(OnboardingFSM.gender)
    return StepResult(texts.ASK_GENDER, gender_keyboard())


async def step_gender(user_id: int, text: str, state: FSMContext) -> StepResult:
    if not text.strip():
        return StepResult(texts.ASK_GENDER_AGAIN, gender_keyboard())
    await state.update_data(gender=text.strip().lower())
    await state.set_state(OnboardingFSM.bio)
    return StepResult(texts.ASK_BIO, remove_keyboard())


async def step_bio(user_id: int, text: str, state: FSMContext) -> StepResult:
    if not text.strip():
        return StepResult(texts.ASK_BIO_AGAIN)
    await state.update_data(bio=text)
    await state.set_state(OnboardingFSM.location)
    return StepResult(texts.ASK_LOCATION)


async def step_location(user_id: int, text: str, state: FSMContext) -> StepResult:
    if not text.strip():
        return StepResult(texts.ASK_LOCATION_AGAIN)
    await state.update_data(location=text)
    await state.set_state(OnboardingFSM.looking_for)
    return StepResult(texts.ASK_LOOKING_FOR, looking_for_keyboard())


async def step_looking_for(user_id: int, text: str, state: FSMContext) -> StepResult:
    data = await state.get_data()
    looking_for = parse_looking_for(text)
    # если запись упадет, сессия остается и ответ можно прислать повторно
    await create_profile(
        user_id,
        user={
            "name": data["name"],
            "age": data["age"],
            "gender": data["gender"],
            "bio": data.get("bio"),
            "location": data.get("location"),
        },
        preferences={
            "looking_for_gender": looking_for,
            "min_age": DEFAULT_MIN_AGE,
            "max_age": DEFAULT_MAX_AGE,
        },
    )
    await state.clear()
    logger.info(f"Анкета пользователя {user_id} создана (ищет: {looking_for})")
    return StepResult(texts.PROFILE_CREATED, main_menu(), completed=True)
