from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class DataAccessError(Exception):
    """Базовая ошибка слоя доступа к таблице."""


class ConfigurationError(DataAccessError):
    """Не заданы обязательные настройки или учетные данные."""


class PermissionDeniedError(DataAccessError):
    """Операция записи без учетных данных сервисного аккаунта."""


class NotFoundError(DataAccessError):
    """Строка с указанным ключом не найдена."""


class ConflictError(DataAccessError):
    """Ключ уже занят другой строкой."""


class TransportError(DataAccessError):
    """Ошибка вызова Google Sheets API (сеть, квоты, права)."""


class MalformedDataError(DataAccessError):
    """Строку или поле не удалось разобрать."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Результат операции с таблицей.

    Репозиторий не решает, бросать исключение или нет: он возвращает Result,
    а вызывающий код выбирает между `ok` и `unwrap()`.
    """
    value: T | None = None
    error: DataAccessError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DataAccessError) -> "Result[T]":
        return cls(error=error)
