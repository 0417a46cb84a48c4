"""
Даты в формате DD/MM/YYYY (фильтры и PATCH заказа).
"""
import re
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from backoffice.core.config import TIMEZONE
from backoffice.core.errors import InvalidFormat

ACCEPTED_FORMAT = "DD/MM/YYYY"

# Только ASCII-цифры, строго 2/2/4
_DATE_RE = re.compile(r"[0-9]{2}/[0-9]{2}/[0-9]{4}")


def is_valid_date(value) -> bool:
    return isinstance(value, str) and _DATE_RE.fullmatch(value) is not None


def format_error(field: str) -> InvalidFormat:
    return InvalidFormat(f"Invalid {field} format. Accepted format: {ACCEPTED_FORMAT}")


def parse_date(value: str, field: str) -> date:
    """
    DD/MM/YYYY -> date. Диапазоны дня и месяца не проверяются, лишнее переносится
    на следующий месяц/год: 31/02/2024 -> 02/03/2024, 15/13/2024 -> 15/01/2025, 00/03/2024 -> 29/02/2024.
    """
    if not is_valid_date(value):
        raise format_error(field)
    day, month, year = (int(part) for part in value.split("/"))
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return date(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        # год 0000 и т.п.: вне диапазона datetime
        raise format_error(field) from None


def local_timezone() -> ZoneInfo:
    return ZoneInfo(TIMEZONE)


def local_midnight(d: date) -> datetime:
    """Полночь календарного дня в часовом поясе приложения."""
    return datetime(d.year, d.month, d.day, tzinfo=local_timezone())


def utc_midnight(d: date) -> datetime:
    """Полночь дня без смещения пояса: хранится как 00:00 UTC этой даты."""
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
