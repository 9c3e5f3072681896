# pos_sheets/auth/accounts.py

from pydantic import BaseModel
from pos_sheets.auth.passwords import HashScheme, detect_scheme, hash_password, verify_password
from pos_sheets.config.settings import settings
from pos_sheets.models.user import PROFILE_FIELDS, User
from pos_sheets.sheets.users import get_user_by_login, update_user
from pos_sheets.utils.logger import log


class LoginResult(BaseModel):
    user: User
    # Пароль хранится открытым текстом, пользователю стоит его сменить
    needs_password_change: bool = False


class PasswordChangeResult(BaseModel):
    success: bool
    message: str


def authenticate(login: str, password: str) -> LoginResult | None:
    """Проверяет логин и пароль. None означает "неверный логин или пароль"."""
    if not login or not password:
        return None
    user = get_user_by_login(login)
    if user is None or not user.password_hash:
        log.info(f"Вход не выполнен: пользователь '{login}' не найден или без пароля.")
        return None
    if not verify_password(password, user.password_hash):
        log.info(f"Вход не выполнен: неверный пароль для '{login}'.")
        return None
    plaintext = detect_scheme(user.password_hash) is HashScheme.PLAINTEXT
    log.info(f"Пользователь '{login}' вошел в систему.")
    return LoginResult(user=user.public_view(), needs_password_change=plaintext)


def change_password(login: str, current_password: str, new_password: str) -> PasswordChangeResult:
    if not current_password or not new_password:
        return PasswordChangeResult(success=False, message="Текущий и новый пароли обязательны")
    if len(new_password) < settings.MIN_PASSWORD_LENGTH:
        return PasswordChangeResult(
            success=False,
            message=f"Новый пароль должен быть не менее {settings.MIN_PASSWORD_LENGTH} символов",
        )
    if new_password == current_password:
        return PasswordChangeResult(success=False, message="Новый пароль не должен совпадать с текущим")

    user = get_user_by_login(login)
    if user is None or not user.password_hash:
        log.error(f"Не удалось проверить пользователя '{login}' при смене пароля.")
        return PasswordChangeResult(success=False, message="Не удалось проверить пользователя")
    if not verify_password(current_password, user.password_hash):
        return PasswordChangeResult(success=False, message="Текущий пароль неверен")

    if not update_user(login, {'password_hash': hash_password(new_password)}):
        return PasswordChangeResult(success=False, message="Не удалось обновить пароль в таблице")
    log.info(f"Пароль пользователя '{login}' изменен.")
    return PasswordChangeResult(success=True, message="Пароль успешно изменен")


def update_profile(login: str, **fields: str | None) -> bool:
    """Записывает только переданные непустые поля ФИО. Без изменений считается успехом."""
    updates = {name: value for name, value in fields.items() if name in PROFILE_FIELDS and value}
    if not updates:
        log.info(f"Нет изменений профиля для '{login}'.")
        return True
    return update_user(login, updates)
