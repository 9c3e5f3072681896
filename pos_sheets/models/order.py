import uuid
from datetime import datetime
from enum import Enum
from typing import ClassVar
from pydantic import BaseModel, Field, field_validator, model_validator
from pos_sheets.models.base import BaseSheetModel
from pos_sheets.models.product import generate_product_id
from pos_sheets.sheets.codec import (
    cell_text, format_items, format_number, format_timestamp,
    optional_text, parse_items, parse_number, parse_timestamp,
)
from pos_sheets.sheets.schema import ORDER_COLUMN_MAP
from pos_sheets.utils.logger import log


class PaymentMethod(str, Enum):
    CASH = "Наличные"
    CARD = "Карта"
    TRANSFER = "Перевод"


def generate_order_id() -> str:
    """ID заказа создается на клиенте до записи и больше не меняется."""
    return f"order_{datetime.now():%Y%m%d%H%M%S}_{uuid.uuid4().hex[:6]}"


class OrderItem(BaseModel):
    id: str = ""
    name: str
    volume: str | None = None
    price: float = 0.0
    quantity: int

    @model_validator(mode="after")
    def fill_id(self):
        if not self.id:
            self.id = generate_product_id(self.name, self.volume)
        return self

    @field_validator('quantity')
    def validate_quantity(cls, v):
        if v <= 0:
            raise ValueError("Количество должно быть положительным числом")
        return v


class Order(BaseSheetModel):
    COLUMN_MAP: ClassVar[dict[str, int]] = ORDER_COLUMN_MAP

    id: str = Field(..., alias="orderId")
    items: list[OrderItem] = []
    total_price: float = Field(0.0, alias="totalPrice")
    # Строка остается строкой, если дату в таблице разобрать не удалось
    timestamp: datetime | str
    payment_method: PaymentMethod | str = Field(..., alias="paymentMethod", union_mode="left_to_right")
    employee: str | None = None

    @classmethod
    def from_sheet_row(cls, row: list, row_number: int | None = None) -> "Order | None":
        order_id = cell_text(row, cls.COLUMN_MAP['order_id']) if row else ""
        if not order_id:
            log.debug(f"Строка {row_number} истории продаж пустая или без ID заказа, пропускаю.")
            return None
        items = [
            OrderItem(name=item.name, volume=item.volume, quantity=item.quantity)
            for item in parse_items(cell_text(row, cls.COLUMN_MAP['items']))
        ]
        total = parse_number(cell_text(row, cls.COLUMN_MAP['total_price']))
        return cls(
            id=order_id,
            items=items,
            total_price=total if total is not None else 0.0,
            timestamp=parse_timestamp(cell_text(row, cls.COLUMN_MAP['timestamp'])),
            payment_method=cell_text(row, cls.COLUMN_MAP['payment_method']),
            employee=optional_text(cell_text(row, cls.COLUMN_MAP['employee'])),
        )

    def sheet_values(self) -> dict[str, str]:
        method = self.payment_method
        return {
            'order_id': self.id,
            'timestamp': format_timestamp(self.timestamp),
            'items': format_items(self.items),
            'payment_method': method.value if isinstance(method, PaymentMethod) else method,
            'total_price': format_number(self.total_price),
            'employee': self.employee,
        }
