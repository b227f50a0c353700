import logging
import os

from dotenv import load_dotenv

# Конфиг из переменных окружения (.env подхватывается, если есть)
load_dotenv()

BOT_TOKEN = os.getenv("BOT_TOKEN", "")

DB_PATH = os.getenv("DB_PATH", "mingle.sqlite3")
MIN_AGE = 18  # моложе регистрироваться нельзя
MAX_AGE = 120
DEFAULT_MIN_AGE = 18
DEFAULT_MAX_AGE = 99
NEXT_PROFILE_DELAY = float(os.getenv("NEXT_PROFILE_DELAY", "1.0"))  # секунды

# Логирование
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger("mingle-bot")


def require_bot_token() -> str:
    if not BOT_TOKEN:
        raise RuntimeError("Укажите BOT_TOKEN через переменную окружения.")
    return BOT_TOKEN
