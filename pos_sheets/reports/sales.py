from datetime import datetime
from pydantic import BaseModel
from pos_sheets.models.order import Order, PaymentMethod
from pos_sheets.sheets.codec import format_number
from pos_sheets.utils.logger import log


class SalesSummary(BaseModel):
    total: float = 0.0
    order_count: int = 0
    by_payment_method: dict[str, float] = {}

    def as_text(self) -> str:
        """Итоги в виде текста для копирования в мессенджер."""
        lines = [f"Общая сумма: {format_number(self.total)} ₽"]
        lines += [f"{method}: {format_number(amount)} ₽" for method, amount in self.by_payment_method.items()]
        return "\n".join(lines)


def summarize_sales(orders: list[Order], start: datetime | None = None, end: datetime | None = None) -> SalesSummary:
    """
    Итоги продаж за период [start, end]. Заказы с неразобранной датой
    учитываются только без фильтра по датам.
    """
    # Сравниваем по настенному времени, как оно записано в таблице
    start = start.replace(tzinfo=None) if start else None
    end = end.replace(tzinfo=None) if end else None
    by_method = {method.value: 0.0 for method in PaymentMethod}
    total = 0.0
    count = 0
    for order in orders:
        if start is not None or end is not None:
            if not isinstance(order.timestamp, datetime):
                log.debug(f"Заказ {order.id} с датой '{order.timestamp}' не попал в отчет за период.")
                continue
            timestamp = order.timestamp.replace(tzinfo=None)
            if start is not None and timestamp < start:
                continue
            if end is not None and timestamp > end:
                continue
        method = order.payment_method.value if isinstance(order.payment_method, PaymentMethod) else order.payment_method
        by_method[method] = by_method.get(method, 0.0) + order.total_price
        total += order.total_price
        count += 1
    return SalesSummary(total=total, order_count=count, by_payment_method=by_method)
