import pytest
from datetime import datetime
from pydantic import ValidationError

from pos_sheets.models.order import Order, OrderItem, PaymentMethod, generate_order_id
from pos_sheets.models.product import Product, generate_product_id, product_key
from pos_sheets.models.user import User


# --- Тесты для Product ---

def test_product_from_sheet_row():
    """Тест: строка листа товаров превращается в Product."""
    product = Product.from_sheet_row(["Латте", "0,3 л", "165,5", "https://img", "латте"], 2)
    assert product.name == "Латте"
    assert product.volume == "0,3 л"
    assert product.price == 165.5
    assert product.image_url == "https://img"
    assert product.ai_hint == "латте"


def test_product_short_row_optional_fields_are_none():
    product = Product.from_sheet_row(["Эспрессо"], 3)
    assert product.volume is None
    assert product.price is None
    assert product.image_url is None


@pytest.mark.parametrize("row", [[], ["", "0,3 л", "100"], ["   "]])
def test_product_blank_rows_are_skipped(row):
    """Тест: пустые строки и строки без названия пропускаются без ошибки."""
    assert Product.from_sheet_row(row, 10) is None


def test_product_bad_price_becomes_none():
    assert Product.from_sheet_row(["Чай", "", "дорого"], 4).price is None


def test_product_to_sheet_row():
    """Тест: незаполненные поля пишутся пустой строкой, цена с запятой."""
    product = Product(name="Раф", price=195.5)
    assert product.to_sheet_row() == ["Раф", "", "195,5", "", ""]


def test_product_round_trip():
    product = Product(name="Латте", volume="0,3 л", price=165, image_url="https://img", ai_hint="латте")
    assert Product.from_sheet_row(product.to_sheet_row(), 7) == product


def test_product_id_does_not_depend_on_row_position():
    """Тест: ID товара одинаков, в какой бы строке он ни оказался."""
    first = Product.from_sheet_row(["Латте", "0,3 л", "165"], 2)
    moved = Product.from_sheet_row(["Латте", "0,3 л", "165"], 9)
    assert first.id == moved.id == generate_product_id("Латте", "0,3 л")


def test_product_id_differs_by_volume():
    assert generate_product_id("Латте", "0,3 л") != generate_product_id("Латте", "0,2 л")
    assert generate_product_id("Эспрессо", None) == generate_product_id("Эспрессо", "")
    assert generate_product_id("Эспрессо", None).startswith("prod_")


def test_product_key_normalizes_missing_volume():
    assert product_key("Эспрессо", None) == "Эспрессо|"
    assert Product(name="Эспрессо").key == "Эспрессо|"


# --- Тесты для User ---

def test_user_from_sheet_row():
    user = User.from_sheet_row(["7", "barista", "plain", "Анна", "", "Смирнова", "Бариста", "#32a852"], 2)
    assert user.id == "7"
    assert user.login == "barista"
    assert user.password_hash == "plain"
    assert user.middle_name is None
    assert user.icon_color == "#32a852"
    assert user.has_valid_icon_color


def test_user_without_login_is_skipped():
    assert User.from_sheet_row(["7", "", "hash"], 2) is None


def test_user_unexpected_color_is_preserved():
    user = User.from_sheet_row(["1", "u", "p", "", "", "", "", "green"], 2)
    assert user.icon_color == "green"
    assert not user.has_valid_icon_color


def test_user_round_trip():
    user = User(id="3", login="admin", password_hash="$2b$10$x", first_name="Иван", icon_color="#abc")
    assert User.from_sheet_row(user.to_sheet_row(), 4) == user


def test_user_public_view_hides_hash():
    user = User(login="admin", password_hash="secret")
    assert user.public_view().password_hash == ""
    assert user.password_hash == "secret"


# --- Тесты для Order ---

def test_order_from_sheet_row():
    """Тест: строка истории продаж разбирается вместе с позициями и датой."""
    order = Order.from_sheet_row(
        ["order_1", "01.05.2024 10:00:00", "Латте (0,3 л) x2, Эспрессо x1", "Карта", "430,5", "Анна"], 2
    )
    assert order.id == "order_1"
    assert order.timestamp == datetime(2024, 5, 1, 10, 0, 0)
    assert order.payment_method == PaymentMethod.CARD
    assert order.total_price == 430.5
    assert order.employee == "Анна"
    assert [(i.name, i.volume, i.quantity) for i in order.items] == [("Латте", "0,3 л", 2), ("Эспрессо", None, 1)]
    assert order.items[0].id == generate_product_id("Латте", "0,3 л")


def test_order_with_malformed_items_keeps_the_rest():
    order = Order.from_sheet_row(["order_2", "01.05.2024 10:00:00", "???, Раф x1", "Наличные", "195"], 3)
    assert [i.name for i in order.items] == ["Раф"]


def test_order_with_unparsable_timestamp_keeps_string():
    order = Order.from_sheet_row(["order_3", "когда-то", "Раф x1", "Наличные", "195"], 4)
    assert order.timestamp == "когда-то"


def test_order_unknown_payment_method_is_kept():
    order = Order.from_sheet_row(["order_4", "01.05.2024 10:00:00", "Раф x1", "Бартер", "195"], 5)
    assert order.payment_method == "Бартер"
    assert not isinstance(order.payment_method, PaymentMethod)


def test_order_without_id_is_skipped():
    assert Order.from_sheet_row(["", "01.05.2024 10:00:00", "Раф x1"], 6) is None


def test_order_to_sheet_row():
    order = Order(
        id="order_9",
        items=[OrderItem(name="Латте", volume="0,3 л", price=165, quantity=2), OrderItem(name="Эспрессо", price=100, quantity=1)],
        total_price=430,
        timestamp="2024-05-01T10:00:00.000Z",
        payment_method=PaymentMethod.TRANSFER,
    )
    assert order.to_sheet_row() == [
        "order_9", "01.05.2024 10:00:00", "Латте (0,3 л) x2, Эспрессо x1", "Перевод", "430", "",
    ]


def test_order_round_trip():
    """Тест: заказ переживает запись и чтение (цены позиций в ячейке не хранятся)."""
    order = Order(
        id="order_10",
        items=[OrderItem(name="Латте", volume="0,3 л", quantity=2), OrderItem(name="Эспрессо", quantity=1)],
        total_price=430.5,
        timestamp=datetime(2024, 5, 1, 10, 0, 0),
        payment_method=PaymentMethod.CASH,
        employee="Анна",
    )
    assert Order.from_sheet_row(order.to_sheet_row(), 2) == order


def test_order_item_quantity_must_be_positive():
    with pytest.raises(ValidationError, match="Количество должно быть положительным"):
        OrderItem(name="Латте", quantity=0)


def test_generate_order_id_is_unique():
    assert generate_order_id() != generate_order_id()
