from pos_sheets.sheets.codec import cell_text
from pos_sheets.sheets.errors import DataAccessError
from pos_sheets.sheets.schema import TableSchema
from pos_sheets.utils.logger import log


def find_row(client, schema: TableSchema, key_values: tuple[str, ...]) -> int | None:
    """
    Возвращает номер строки листа (с 1) первой записи с указанным ключом.

    Читаются только ключевые колонки, поиск линейный. Пробелы по краям
    не учитываются, как и при разборе строк. Пустая ячейка равна
    пустой строке, поэтому товар без объема ищется по volume="".
    None означает "не найдено" или ошибку чтения (она логируется).
    """
    target = tuple("" if v is None else str(v).strip() for v in key_values)
    first_offset = min(schema.key_offsets)
    offsets = [offset - first_offset for offset in schema.key_offsets]
    try:
        rows = client.get_values(schema.key_range)
    except DataAccessError as e:
        log.error(f"Ошибка поиска {target} в листе '{schema.sheet_name}': {e}")
        return None

    for index, row in enumerate(rows):
        values = tuple(cell_text(row, offset) for offset in offsets)
        if values == target:
            row_number = index + schema.data_start_row
            log.debug(f"Запись {target} найдена в строке {row_number} листа '{schema.sheet_name}'.")
            return row_number
    log.debug(f"Запись {target} не найдена в листе '{schema.sheet_name}'.")
    return None
