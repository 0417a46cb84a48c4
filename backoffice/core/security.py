"""
Хеширование паролей (bcrypt) и JWT-токены для авторизации.
Используем bcrypt напрямую (без passlib) из-за совместимости с новыми версиями.
"""
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from backoffice.core.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES

# bcrypt принимает не более 72 байт
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Хеш пароля для сохранения в БД."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Проверка пароля против хеша. Если хеша нет или он битый — False."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(employee) -> str:
    """JWT access token сотрудника: sub = логин, role, eid = id (по нему сотрудник ищется в БД)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=JWT_EXPIRE_MINUTES)
    payload = {
        "sub": employee.login,
        "role": employee.role or "",
        "eid": str(employee.id),
        "exp": expire,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Декодировать JWT. При ошибке — None."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
