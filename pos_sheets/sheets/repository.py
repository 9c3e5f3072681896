# pos_sheets/sheets/repository.py

from pydantic import ValidationError
from pos_sheets.models.base import BaseSheetModel
from pos_sheets.sheets.errors import (
    ConfigurationError, ConflictError, DataAccessError, MalformedDataError,
    NotFoundError, PermissionDeniedError, Result,
)
from pos_sheets.sheets.locator import SheetLocator
from pos_sheets.sheets.resolver import find_row
from pos_sheets.sheets.schema import TableSchema
from pos_sheets.utils.logger import log


class TableRepository:
    """
    CRUD поверх одного листа таблицы.

    У таблицы нет транзакций и индексов: уникальность проверяется отдельным
    чтением ключевых колонок перед записью, строки адресуются по номеру.
    Между проверкой и записью нет блокировки, так что два одновременных
    добавления одного ключа могут пройти оба.

    Все методы возвращают Result и не бросают исключений.
    """

    def __init__(self, client, schema: TableSchema, model: type[BaseSheetModel], locator: SheetLocator):
        self.client = client
        self.schema = schema
        self.model = model
        self.locator = locator

    @property
    def sheet_name(self) -> str:
        return self.schema.sheet_name

    def key_of(self, entity: BaseSheetModel) -> tuple[str, ...]:
        row = entity.to_sheet_row()
        return tuple(row[offset] for offset in self.schema.key_offsets)

    def decode(self, row: list, row_number: int) -> Result:
        """Разбирает строку листа. Пустая строка дает Result с value=None."""
        try:
            return Result.success(self.model.from_sheet_row(row, row_number))
        except ValidationError as e:
            error = MalformedDataError(f"Строка {row_number} листа '{self.sheet_name}' не разобрана: {e}")
            log.warning(f"{error} Пропускаю.")
            return Result.failure(error)

    def _configuration_error(self) -> Result | None:
        if not self.client.is_configured:
            return Result.failure(ConfigurationError(self.client.config_error or "Google Sheets не настроен."))
        return None

    def check_write_access(self, operation: str) -> Result | None:
        """Проверка перед любой записью: настроен ли клиент и есть ли права сервисного аккаунта."""
        not_configured = self._configuration_error()
        if not_configured:
            log.error(f"{operation} в листе '{self.sheet_name}' невозможно: {not_configured.error}")
            return not_configured
        if not self.client.can_write:
            message = f"{operation} в листе '{self.sheet_name}' требует сервисного аккаунта, API-ключа недостаточно."
            log.error(message)
            return Result.failure(PermissionDeniedError(message))
        return None

    # --- ЧТЕНИЕ ---

    def fetch_all(self) -> Result[list]:
        not_configured = self._configuration_error()
        if not_configured:
            return not_configured
        try:
            rows = self.client.get_values(self.schema.data_range)
        except DataAccessError as e:
            log.error(f"Ошибка чтения листа '{self.sheet_name}': {e}")
            return Result.failure(e)

        entities = []
        for index, row in enumerate(rows):
            decoded = self.decode(row, index + self.schema.data_start_row)
            if decoded.ok and decoded.value is not None:
                entities.append(decoded.value)
        log.info(f"Из листа '{self.sheet_name}' прочитано {len(entities)} записей из {len(rows)} строк.")
        return Result.success(entities)

    def find(self, key: tuple[str, ...]) -> Result[int]:
        not_configured = self._configuration_error()
        if not_configured:
            return not_configured
        row_number = find_row(self.client, self.schema, key)
        if row_number is None:
            return Result.failure(NotFoundError(f"Запись {key} не найдена в листе '{self.sheet_name}'."))
        return Result.success(row_number)

    def read_row(self, key: tuple[str, ...]) -> Result:
        """Находит строку по ключу и возвращает (номер строки, сущность)."""
        found = self.find(key)
        if not found.ok:
            return found
        try:
            rows = self.client.get_values(self.schema.row_range(found.value))
        except DataAccessError as e:
            log.error(f"Ошибка чтения строки {found.value} листа '{self.sheet_name}': {e}")
            return Result.failure(e)
        decoded = self.decode(rows[0] if rows else [], found.value)
        if not decoded.ok:
            return decoded
        entity = decoded.value
        if entity is None:
            return Result.failure(NotFoundError(f"Строка {found.value} листа '{self.sheet_name}' пуста."))
        return Result.success((found.value, entity))

    # --- ЗАПИСЬ ---

    def insert(self, entity: BaseSheetModel) -> Result[int]:
        denied = self.check_write_access("Добавление")
        if denied:
            return denied
        key = self.key_of(entity)
        if not key[0]:
            log.error(f"Попытка добавить запись без ключа в лист '{self.sheet_name}'.")
            return Result.failure(NotFoundError("Не заполнено ключевое поле."))

        existing = find_row(self.client, self.schema, key)
        if existing is not None:
            log.warning(f"Запись {key} уже есть в строке {existing} листа '{self.sheet_name}'. Пропускаю.")
            return Result.failure(ConflictError(f"Запись {key} уже существует (строка {existing})."))

        try:
            self.client.append_rows(self.schema.append_range, [entity.to_sheet_row()])
        except DataAccessError as e:
            log.error(f"Ошибка добавления {key} в лист '{self.sheet_name}': {e}")
            return Result.failure(e)
        log.info(f"Запись {key} добавлена в лист '{self.sheet_name}'.")
        return Result.success(1)

    def insert_many(self, entities: list[BaseSheetModel]) -> Result[int]:
        """Добавляет все строки одним запросом, без проверки уникальности."""
        denied = self.check_write_access("Пакетное добавление")
        if denied:
            return denied
        if not entities:
            return Result.success(0)
        try:
            self.client.append_rows(self.schema.append_range, [e.to_sheet_row() for e in entities])
        except DataAccessError as e:
            log.error(f"Ошибка пакетного добавления в лист '{self.sheet_name}': {e}")
            return Result.failure(e)
        log.info(f"В лист '{self.sheet_name}' добавлено {len(entities)} строк.")
        return Result.success(len(entities))

    def update(self, old_key: tuple[str, ...], entity: BaseSheetModel) -> Result[int]:
        """Полная перезапись строки, найденной по старому ключу."""
        denied = self.check_write_access("Обновление")
        if denied:
            return denied
        new_key = self.key_of(entity)
        if not old_key or not old_key[0] or not new_key[0]:
            log.error(f"Для обновления в листе '{self.sheet_name}' нужны старый и новый ключ.")
            return Result.failure(NotFoundError("Не заполнено ключевое поле."))
        old_key = tuple("" if v is None else str(v) for v in old_key)

        row_number = find_row(self.client, self.schema, old_key)
        if row_number is None:
            log.error(f"Запись {old_key} не найдена в листе '{self.sheet_name}' для обновления.")
            return Result.failure(NotFoundError(f"Запись {old_key} не найдена."))

        if new_key != old_key:
            conflict = find_row(self.client, self.schema, new_key)
            if conflict is not None and conflict != row_number:
                log.warning(
                    f"Конфликт: запись {new_key} уже есть в строке {conflict} листа '{self.sheet_name}'. "
                    f"Обновление отменено."
                )
                return Result.failure(ConflictError(f"Запись {new_key} уже существует (строка {conflict})."))

        try:
            self.client.update_values(self.schema.row_range(row_number), [entity.to_sheet_row()])
        except DataAccessError as e:
            log.error(f"Ошибка обновления строки {row_number} листа '{self.sheet_name}': {e}")
            return Result.failure(e)
        log.info(f"Строка {row_number} листа '{self.sheet_name}' обновлена.")
        return Result.success(row_number)

    def _delete_rows(self, start_index: int, end_index: int) -> Result:
        """Удаляет строки [start_index, end_index) (индексы с нуля) со сдвигом остальных вверх."""
        sheet_id = self.locator.resolve(self.sheet_name)
        if sheet_id is None:
            log.error(f"Не удалось определить id листа '{self.sheet_name}'. Удаление отменено.")
            return Result.failure(NotFoundError(f"Лист '{self.sheet_name}' не найден."))
        try:
            self.client.batch_update([{
                'deleteDimension': {
                    'range': {
                        'sheetId': sheet_id,
                        'dimension': 'ROWS',
                        'startIndex': start_index,
                        'endIndex': end_index,
                    }
                }
            }])
        except DataAccessError as e:
            log.error(f"Ошибка удаления строк {start_index}-{end_index} листа '{self.sheet_name}': {e}")
            return Result.failure(e)
        return Result.success(end_index - start_index)

    def delete(self, key: tuple[str, ...]) -> Result[int]:
        denied = self.check_write_access("Удаление")
        if denied:
            return denied
        if not key or not key[0]:
            log.error(f"Попытка удалить запись без ключа из листа '{self.sheet_name}'.")
            return Result.failure(NotFoundError("Не заполнено ключевое поле."))

        row_number = find_row(self.client, self.schema, key)
        if row_number is None:
            log.error(f"Запись {key} не найдена в листе '{self.sheet_name}' для удаления.")
            return Result.failure(NotFoundError(f"Запись {key} не найдена."))

        result = self._delete_rows(row_number - 1, row_number)
        if result.ok:
            log.info(f"Запись {key} (строка {row_number}) удалена из листа '{self.sheet_name}'.")
        return result

    def clear_all(self) -> Result[int]:
        """Удаляет все строки данных, заголовок остается."""
        denied = self.check_write_access("Очистка")
        if denied:
            return denied
        try:
            rows = self.client.get_values(self.schema.data_range)
        except DataAccessError as e:
            log.error(f"Ошибка чтения листа '{self.sheet_name}' перед очисткой: {e}")
            return Result.failure(e)

        if not rows:
            log.info(f"Лист '{self.sheet_name}' уже пуст, очищать нечего.")
            return Result.success(0)

        result = self._delete_rows(self.schema.header_rows, self.schema.header_rows + len(rows))
        if result.ok:
            log.info(f"Из листа '{self.sheet_name}' удалено {len(rows)} строк.")
        return result
