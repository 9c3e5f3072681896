import hmac
from enum import Enum
from passlib.context import CryptContext
from pos_sheets.utils.logger import log

pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class HashScheme(str, Enum):
    BCRYPT = "bcrypt"
    # Старые строки таблицы хранят пароль открытым текстом.
    # Поддерживается только до перехода всех пользователей на bcrypt.
    PLAINTEXT = "plaintext"


def detect_scheme(stored: str) -> HashScheme:
    if stored.startswith(BCRYPT_PREFIXES):
        return HashScheme.BCRYPT
    return HashScheme.PLAINTEXT


def hash_password(password: str) -> str:
    return pwd.hash(password)


def verify_password(password: str, stored: str | None) -> bool:
    if not password or not stored:
        return False
    scheme = detect_scheme(stored)
    if scheme is HashScheme.BCRYPT:
        try:
            return pwd.verify(password, stored)
        except ValueError as e:
            log.error(f"Некорректный bcrypt-хэш в таблице пользователей: {e}")
            return False
    log.warning("Пароль пользователя хранится открытым текстом, проверка прямым сравнением.")
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
