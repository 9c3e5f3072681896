# pos_sheets/sheets/codec.py
"""
Преобразование значений ячеек в типы Python и обратно.

Таблица ведется в русской локали: десятичная запятая, даты вида
``dd.MM.yyyy HH:mm:ss``. Ни одна функция здесь не бросает исключений на
"грязных" данных: некорректное значение логируется и заменяется на None
(или сохраняется как есть, если терять его нельзя).
"""

import re
from datetime import datetime
from pydantic import BaseModel, TypeAdapter, ValidationError
from pos_sheets.utils.logger import log

NUMBER_PATTERN = re.compile(r"^\d*([.,]\d+)?$")
COLOR_PATTERN = re.compile(r"^#([0-9A-Fa-f]{3,4}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
ITEM_PATTERN = re.compile(r"^(.+?)(?:\s+\((.+?)\))?\s+x(\d+)$")
TIMESTAMP_PATTERN = re.compile(r"^\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}:\d{2}$")

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"
ITEM_SEPARATOR = ", "

_datetime_adapter = TypeAdapter(datetime)


class ParsedItem(BaseModel):
    name: str
    volume: str | None = None
    quantity: int


def cell_text(row: list, offset: int) -> str:
    """Текст ячейки по смещению; у коротких строк API просто не возвращает хвост."""
    if offset >= len(row) or row[offset] is None:
        return ""
    return str(row[offset]).strip()


def optional_text(value: str) -> str | None:
    return value or None


# --- ЧИСЛА ---

def parse_number(value) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    if not NUMBER_PATTERN.match(text):
        log.warning(f"Не удалось разобрать число '{text}', значение пропущено.")
        return None
    return float(text.replace(",", "."))


def format_number(value: float | int | None) -> str:
    """Число в ячейку: десятичная запятая, целые без дробной части."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    # Без экспоненты: 1e-05 в ячейке не разобрать обратно
    return f"{float(value):.10f}".rstrip("0").rstrip(".").replace(".", ",")


# --- ЦВЕТ ---

def is_valid_color(value: str | None) -> bool:
    return bool(value) and COLOR_PATTERN.match(value) is not None


def parse_color(value) -> str | None:
    text = "" if value is None else str(value).strip()
    if not text:
        return None
    if not is_valid_color(text):
        # Не затираем неожиданные старые данные
        log.warning(f"Значение цвета '{text}' не похоже на HEX, оставляю как есть.")
    return text


# --- ПОЗИЦИИ ЗАКАЗА ---

def parse_items(value) -> list[ParsedItem]:
    text = "" if value is None else str(value).strip()
    if not text:
        return []
    items = []
    for chunk in text.split(ITEM_SEPARATOR):
        match = ITEM_PATTERN.match(chunk.strip())
        if not match:
            log.warning(f"Не удалось разобрать позицию заказа '{chunk}', пропускаю.")
            continue
        name, volume, quantity = match.groups()
        if int(quantity) < 1:
            log.warning(f"Количество в позиции заказа '{chunk}' меньше 1, пропускаю.")
            continue
        items.append(ParsedItem(name=name, volume=volume, quantity=int(quantity)))
    return items


def format_item(name: str, volume: str | None, quantity: int) -> str:
    if volume:
        return f"{name} ({volume}) x{quantity}"
    return f"{name} x{quantity}"


def format_items(items) -> str:
    return ITEM_SEPARATOR.join(format_item(i.name, i.volume, i.quantity) for i in items)


# --- ДАТА И ВРЕМЯ ---

def parse_timestamp(value) -> datetime | str:
    """
    Сначала формат таблицы, затем ISO-8601. Если не подошло ни то ни другое,
    возвращается исходная строка: потребители обязаны её переносить.
    """
    if isinstance(value, datetime):
        return value
    text = "" if value is None else str(value).strip()
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        log.warning(f"Не удалось разобрать дату '{text}', оставляю строку как есть.")
        return text


def format_timestamp(value) -> str:
    """
    Дата в ячейку в формате dd.MM.yyyy HH:mm:ss.

    Порядок: уже нужный формат -> ISO -> общий разбор -> текущее время.
    Часовой пояс не пересчитывается, берутся поля даты как есть.
    """
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    text = "" if value is None else str(value).strip()
    if TIMESTAMP_PATTERN.match(text):
        return text
    try:
        return datetime.fromisoformat(text).strftime(TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        return _datetime_adapter.validate_python(text).strftime(TIMESTAMP_FORMAT)
    except ValidationError:
        pass
    log.warning(f"Не удалось разобрать дату '{text}', записываю текущее время.")
    return datetime.now().strftime(TIMESTAMP_FORMAT)
