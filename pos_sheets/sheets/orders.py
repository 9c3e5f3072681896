# pos_sheets/sheets/orders.py

from pos_sheets.models.order import Order
from pos_sheets.sheets.client import gs_client, sheet_locator
from pos_sheets.sheets.repository import TableRepository
from pos_sheets.sheets.schema import orders_schema
from pos_sheets.utils.logger import log


def _repository() -> TableRepository:
    return TableRepository(gs_client, orders_schema(), Order, sheet_locator)


def fetch_orders() -> list[Order]:
    """История продаж. Бросает DataAccessError, если лист не удалось прочитать."""
    return _repository().fetch_all().unwrap()


def add_order(order: Order) -> bool:
    """Дописывает заказ в конец истории. Заказ с уже существующим ID не пишется."""
    log.info(f"Сохранение заказа {order.id}: {len(order.items)} позиций на сумму {order.total_price}.")
    return _repository().insert(order).ok


def delete_order(order_id: str) -> bool:
    return _repository().delete((order_id,)).ok


def clear_all_orders() -> bool:
    """Удаляет всю историю продаж, строка заголовка остается."""
    return _repository().clear_all().ok
