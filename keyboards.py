from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

BTN_BROWSE = "🔍 Browse"
BTN_MATCHES = "💬 Matches"
BTN_PROFILE = "👤 Profile"
BTN_SETTINGS = "⚙️ Settings"


def main_menu() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_BROWSE), KeyboardButton(text=BTN_MATCHES)],
            [KeyboardButton(text=BTN_PROFILE), KeyboardButton(text=BTN_SETTINGS)],
        ],
        resize_keyboard=True,
    )


def remove_keyboard() -> ReplyKeyboardRemove:
    return ReplyKeyboardRemove()


def gender_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="Male"), KeyboardButton(text="Female"), KeyboardButton(text="Other")],
        ],
        resize_keyboard=True,
        one_time_keyboard=True,
    )


def looking_for_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="Men"), KeyboardButton(text="Women"), KeyboardButton(text="Both")],
        ],
        resize_keyboard=True,
        one_time_keyboard=True,
    )


def swipe_inline_kb(candidate_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="❌ Pass", callback_data=f"pass_{candidate_id}"),
             InlineKeyboardButton(text="❤️ Like", callback_data=f"like_{candidate_id}")],
        ]
    )
