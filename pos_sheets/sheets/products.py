# pos_sheets/sheets/products.py

from pydantic import BaseModel
from pos_sheets.catalog.defaults import get_default_products
from pos_sheets.models.product import Product
from pos_sheets.sheets.client import gs_client, sheet_locator
from pos_sheets.sheets.repository import TableRepository
from pos_sheets.sheets.schema import products_schema
from pos_sheets.utils.logger import log


class SyncResult(BaseModel):
    success: bool
    message: str
    added_count: int = 0
    skipped_count: int = 0


def _repository() -> TableRepository:
    return TableRepository(gs_client, products_schema(), Product, sheet_locator)


def _key(name: str, volume: str | None) -> tuple[str, str]:
    return (name or "", volume or "")


def fetch_products() -> list[Product]:
    """Все товары листа. Бросает DataAccessError, если лист не удалось прочитать."""
    return _repository().fetch_all().unwrap()


def get_product(name: str, volume: str | None = None) -> Product | None:
    result = _repository().read_row(_key(name, volume))
    if not result.ok:
        return None
    return result.value[1]


def add_product(product: Product) -> bool:
    """Добавляет товар, если пары (название, объем) еще нет в листе."""
    return _repository().insert(product).ok


def update_product(original_name: str, original_volume: str | None, new_data: Product) -> bool:
    """Находит товар по старым названию и объему и перезаписывает строку целиком."""
    log.info(
        f"Обновление товара '{original_name}' ({original_volume or ''}) -> "
        f"'{new_data.name}' ({new_data.volume or ''})"
    )
    return _repository().update(_key(original_name, original_volume), new_data).ok


def delete_product(name: str, volume: str | None = None) -> bool:
    return _repository().delete(_key(name, volume)).ok


def sync_default_products(seed: list[Product] | None = None) -> SyncResult:
    """
    Дописывает в лист товары из стартового списка, которых там еще нет.

    Сравнение идет по ключу 'название|объем', все недостающие строки
    уходят одним запросом.
    """
    repository = _repository()
    denied = repository.check_write_access("Синхронизация")
    if denied:
        return SyncResult(success=False, message=str(denied.error))

    seed = get_default_products() if seed is None else seed
    log.info(f"Синхронизация товаров: в стартовом списке {len(seed)} позиций.")

    current = repository.fetch_all()
    if not current.ok:
        return SyncResult(success=False, message=f"Не удалось прочитать лист товаров: {current.error}")
    existing_keys = {product.key for product in current.value}

    to_add = [product for product in seed if product.key not in existing_keys]
    skipped = len(seed) - len(to_add)
    log.info(f"К добавлению: {len(to_add)}, пропущено: {skipped}.")

    if not to_add:
        return SyncResult(
            success=True,
            message="Все товары из стартового списка уже есть в таблице.",
            skipped_count=skipped,
        )

    added = repository.insert_many(to_add)
    if not added.ok:
        return SyncResult(success=False, message=f"Не удалось добавить товары: {added.error}")
    return SyncResult(
        success=True,
        message=f"Добавлено товаров: {added.value}.",
        added_count=added.value,
        skipped_count=skipped,
    )
