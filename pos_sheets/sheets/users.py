# pos_sheets/sheets/users.py

from pos_sheets.models.user import User
from pos_sheets.sheets.client import gs_client, sheet_locator
from pos_sheets.sheets.repository import TableRepository
from pos_sheets.sheets.schema import users_schema
from pos_sheets.utils.logger import log

# Поля, которые можно менять через update_user. Логин является ключом и не меняется.
UPDATABLE_FIELDS = {
    'password_hash', 'first_name', 'middle_name', 'last_name', 'position', 'icon_color',
}


def _repository() -> TableRepository:
    return TableRepository(gs_client, users_schema(), User, sheet_locator)


def fetch_users() -> list[User]:
    """Все пользователи листа. Бросает DataAccessError, если лист не удалось прочитать."""
    return _repository().fetch_all().unwrap()


def get_user_by_login(login: str) -> User | None:
    if not login:
        return None
    result = _repository().read_row((login,))
    if not result.ok:
        log.info(f"Пользователь '{login}' не найден: {result.error}")
        return None
    return result.value[1]


def update_user(login: str, updates: dict) -> bool:
    """
    Частичное обновление пользователя.

    Хранилище умеет только перезаписывать строку целиком, поэтому текущая
    строка сначала читается, изменённые поля накладываются поверх, и
    строка записывается заново.
    """
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        log.error(f"Нельзя обновить поля {sorted(unknown)} пользователя '{login}'.")
        return False
    if not login:
        log.error("Логин пользователя для обновления не указан.")
        return False

    repository = _repository()
    if repository.check_write_access("Обновление пользователя"):
        return False

    current = repository.read_row((login,))
    if not current.ok:
        log.error(f"Пользователь '{login}' не найден для обновления: {current.error}")
        return False
    _, user = current.value

    updated = user.model_copy(update=updates)
    return repository.update((login,), updated).ok
