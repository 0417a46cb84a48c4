"""
Конфигурация back office. Значения из .env или переменных окружения.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Параметры БД по умолчанию (локальная разработка)
DEFAULT_HOST = "localhost"
DEFAULT_PORT = "5432"
DEFAULT_NAME = "backoffice"
DEFAULT_USER = "postgres"
DEFAULT_PASSWORD = "postgres"

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{os.getenv('DATABASE_USER', DEFAULT_USER)}:{os.getenv('DATABASE_PASSWORD', DEFAULT_PASSWORD)}@"
    f"{os.getenv('DATABASE_HOST', DEFAULT_HOST)}:{os.getenv('DATABASE_PORT', DEFAULT_PORT)}/{os.getenv('DATABASE_NAME', DEFAULT_NAME)}",
)

# Схема с таблицами заказов
DATABASE_SCHEMA = os.getenv("DATABASE_SCHEMA", "commerce").strip()

# SQL в лог (echo)
API_DEBUG = os.getenv("API_DEBUG", "false").lower() == "true"

# JWT
JWT_SECRET = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRATION_MINUTES", "60"))

# Часовой пояс для фильтров по дате (DD/MM/YYYY = полночь в этом поясе)
TIMEZONE = os.getenv("TIMEZONE", "Asia/Tashkent").strip()

# Пагинация списка заказов
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
