from typing import ClassVar
from pydantic import Field, model_validator
from pos_sheets.models.base import BaseSheetModel
from pos_sheets.sheets.codec import cell_text, format_number, optional_text, parse_number
from pos_sheets.sheets.schema import PRODUCT_COLUMN_MAP
from pos_sheets.utils.logger import log


def generate_product_id(name: str, volume: str | None) -> str:
    """
    Стабильный ID товара по паре (название, объем).

    Позиция строки в хэш не входит, поэтому ID не меняется после удаления
    строк выше. Хэш 32-битный, как у String.hashCode в Java.
    """
    data = f"{name}-{volume or 'none'}".encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        value = (value * 31 + int.from_bytes(data[i:i + 2], "little")) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return f"prod_{abs(value):x}"


def product_key(name: str, volume: str | None) -> str:
    """Составной ключ 'название|объем' для сравнения множеств."""
    return f"{name}|{volume or ''}"


class Product(BaseSheetModel):
    COLUMN_MAP: ClassVar[dict[str, int]] = PRODUCT_COLUMN_MAP

    id: str = ""
    name: str
    volume: str | None = None
    price: float | None = None
    image_url: str | None = Field(None, alias="imageUrl")
    ai_hint: str | None = Field(None, alias="aiHint")

    @model_validator(mode="after")
    def fill_id(self):
        if not self.id:
            self.id = generate_product_id(self.name, self.volume)
        return self

    @property
    def key(self) -> str:
        return product_key(self.name, self.volume)

    @classmethod
    def from_sheet_row(cls, row: list, row_number: int | None = None) -> "Product | None":
        name = cell_text(row, cls.COLUMN_MAP['name']) if row else ""
        if not name:
            log.debug(f"Строка {row_number} листа товаров пустая или без названия, пропускаю.")
            return None
        return cls(
            name=name,
            volume=optional_text(cell_text(row, cls.COLUMN_MAP['volume'])),
            price=parse_number(cell_text(row, cls.COLUMN_MAP['price'])),
            image_url=optional_text(cell_text(row, cls.COLUMN_MAP['image_url'])),
            ai_hint=optional_text(cell_text(row, cls.COLUMN_MAP['ai_hint'])),
        )

    def sheet_values(self) -> dict[str, str]:
        return {
            'name': self.name,
            'volume': self.volume,
            'price': format_number(self.price),
            'image_url': self.image_url,
            'ai_hint': self.ai_hint,
        }
