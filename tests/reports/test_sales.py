from datetime import datetime, timezone

from pos_sheets.models.order import Order, PaymentMethod
from pos_sheets.reports.sales import summarize_sales


def order(order_id, total, method, timestamp):
    return Order(id=order_id, total_price=total, payment_method=method, timestamp=timestamp)


def sample_orders():
    return [
        order("o1", 430, PaymentMethod.CARD, datetime(2024, 5, 1, 10, 0)),
        order("o2", 195.5, PaymentMethod.CASH, datetime(2024, 5, 2, 12, 30)),
        order("o3", 150, PaymentMethod.CARD, datetime(2024, 5, 3, 9, 15)),
        order("o4", 100, "Бартер", "вчера вечером"),
    ]


def test_summary_by_payment_method():
    summary = summarize_sales(sample_orders())
    assert summary.total == 875.5
    assert summary.order_count == 4
    assert summary.by_payment_method == {
        "Наличные": 195.5,
        "Карта": 580.0,
        "Перевод": 0.0,
        "Бартер": 100.0,
    }


def test_summary_for_period():
    """Тест: границы периода включаются, заказы с неразобранной датой пропускаются."""
    summary = summarize_sales(
        sample_orders(),
        start=datetime(2024, 5, 2, 12, 30),
        end=datetime(2024, 5, 3, 9, 15),
    )
    assert summary.order_count == 2
    assert summary.total == 345.5
    assert "Бартер" not in summary.by_payment_method


def test_summary_period_with_timezone():
    summary = summarize_sales(sample_orders(), start=datetime(2024, 5, 3, tzinfo=timezone.utc))
    assert summary.order_count == 1
    assert summary.by_payment_method["Карта"] == 150.0


def test_empty_summary():
    summary = summarize_sales([])
    assert summary.total == 0
    assert summary.order_count == 0
    assert set(summary.by_payment_method) == {m.value for m in PaymentMethod}


def test_summary_as_text():
    text = summarize_sales(sample_orders()[:2]).as_text()
    assert text.splitlines() == [
        "Общая сумма: 625,5 ₽",
        "Наличные: 195,5 ₽",
        "Карта: 430 ₽",
        "Перевод: 0 ₽",
    ]
