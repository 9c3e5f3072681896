import sys
import os
from gspread.exceptions import WorksheetNotFound

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from pos_sheets.sheets.client import gs_client
from pos_sheets.sheets.products import sync_default_products
from pos_sheets.sheets.schema import orders_schema, products_schema, users_schema
from pos_sheets.utils.logger import log


def initialize_google_sheets() -> bool:
    """
    Проверяет и при необходимости создает листы товаров, пользователей и
    истории продаж с заголовками. Заголовки берутся из схем колонок.
    """
    log.info("--- Начало инициализации Google Sheets ---")
    if not gs_client.is_configured:
        log.critical(gs_client.config_error)
        return False
    if not gs_client.can_write:
        log.critical("Для создания листов нужен сервисный аккаунт.")
        return False

    spreadsheet = gs_client.spreadsheet
    for schema in (products_schema(), users_schema(), orders_schema()):
        headers = list(schema.headers)
        try:
            worksheet = spreadsheet.worksheet(schema.sheet_name)
            log.info(f"✔️ Лист '{schema.sheet_name}' уже существует.")
            if not worksheet.row_values(1):
                log.warning(f"Лист '{schema.sheet_name}' без заголовков. Добавляю...")
                worksheet.update([headers], "A1", value_input_option='USER_ENTERED')
        except WorksheetNotFound:
            log.warning(f"⚠️ Лист '{schema.sheet_name}' не найден. Создаю новый...")
            try:
                worksheet = spreadsheet.add_worksheet(title=schema.sheet_name, rows=1000, cols=schema.width)
                worksheet.update([headers], "A1", value_input_option='USER_ENTERED')
                log.info(f"    -> Лист '{schema.sheet_name}' успешно создан с заголовками.")
            except Exception as e:
                log.error(f"    -> ❌ Не удалось создать лист '{schema.sheet_name}': {e}")
                return False

    log.info("--- Инициализация Google Sheets завершена ---")
    return True


if __name__ == "__main__":
    if initialize_google_sheets() and "--sync-products" in sys.argv:
        result = sync_default_products()
        log.info(result.message)
