# pos_sheets/sheets/schema.py

from dataclasses import dataclass
from gspread.utils import absolute_range_name, rowcol_to_a1
from pos_sheets.config.settings import settings

# --- КОНСТАНТЫ ДЛЯ МАППИНГА КОЛОНОК (смещение от колонки A, с нуля) ---
PRODUCT_COLUMN_MAP = {'name': 0, 'volume': 1, 'price': 2, 'image_url': 3, 'ai_hint': 4}
USER_COLUMN_MAP = {
    'id': 0, 'login': 1, 'password_hash': 2, 'first_name': 3,
    'middle_name': 4, 'last_name': 5, 'position': 6, 'icon_color': 7,
}
ORDER_COLUMN_MAP = {
    'order_id': 0, 'timestamp': 1, 'items': 2, 'payment_method': 3,
    'total_price': 4, 'employee': 5,
}

HEADER_ROW_COUNT = 1

PRODUCT_HEADERS = ["Название", "Объем", "Цена", "Изображение", "Подсказка"]
USER_HEADERS = ["ID", "Логин", "Пароль", "Имя", "Отчество", "Фамилия", "Должность", "Цвет"]
ORDER_HEADERS = ["ID заказа", "Дата и время", "Состав", "Оплата", "Сумма", "Сотрудник"]


def column_letter(offset: int) -> str:
    """Буква колонки по смещению с нуля: 0 -> 'A', 26 -> 'AA'."""
    return rowcol_to_a1(1, offset + 1).rstrip("0123456789")


@dataclass(frozen=True)
class TableSchema:
    """Раскладка одного листа: какие поля в каких колонках и откуда начинаются данные."""
    sheet_name: str
    columns: dict[str, int]
    headers: tuple[str, ...]
    key_fields: tuple[str, ...]
    header_rows: int = HEADER_ROW_COUNT

    @property
    def width(self) -> int:
        return max(self.columns.values()) + 1

    @property
    def last_column(self) -> str:
        return column_letter(self.width - 1)

    @property
    def data_start_row(self) -> int:
        """Номер (с 1) первой строки с данными."""
        return self.header_rows + 1

    @property
    def data_range(self) -> str:
        return absolute_range_name(self.sheet_name, f"A{self.data_start_row}:{self.last_column}")

    @property
    def append_range(self) -> str:
        return absolute_range_name(self.sheet_name, f"A:{self.last_column}")

    @property
    def key_offsets(self) -> list[int]:
        return [self.columns[field] for field in self.key_fields]

    @property
    def key_range(self) -> str:
        """Только ключевые колонки, начиная с первой строки данных."""
        first = column_letter(min(self.key_offsets))
        last = column_letter(max(self.key_offsets))
        return absolute_range_name(self.sheet_name, f"{first}{self.data_start_row}:{last}")

    def row_range(self, row_number: int) -> str:
        return absolute_range_name(self.sheet_name, f"A{row_number}:{self.last_column}{row_number}")


def products_schema() -> TableSchema:
    return TableSchema(
        sheet_name=settings.PRODUCTS_SHEET_NAME,
        columns=PRODUCT_COLUMN_MAP,
        headers=tuple(PRODUCT_HEADERS),
        key_fields=('name', 'volume'),
    )


def users_schema() -> TableSchema:
    return TableSchema(
        sheet_name=settings.USERS_SHEET_NAME,
        columns=USER_COLUMN_MAP,
        headers=tuple(USER_HEADERS),
        key_fields=('login',),
    )


def orders_schema() -> TableSchema:
    return TableSchema(
        sheet_name=settings.SALES_SHEET_NAME,
        columns=ORDER_COLUMN_MAP,
        headers=tuple(ORDER_HEADERS),
        key_fields=('order_id',),
    )
