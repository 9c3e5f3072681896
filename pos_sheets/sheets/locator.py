from cachetools import Cache
from pos_sheets.sheets.errors import DataAccessError
from pos_sheets.utils.logger import log


class SheetLocator:
    """
    Находит внутренний числовой id листа (gid) по его названию.

    Результат кладется в переданный кэш. По умолчанию это обычный Cache без
    срока жизни: id листа запоминается до конца процесса, и если лист
    переименуют или пересоздадут, запрос уйдет по старому id. Кому это важно,
    передает TTLCache или вызывает invalidate().
    """

    def __init__(self, client, cache: Cache | None = None):
        self.client = client
        self.cache = cache if cache is not None else Cache(maxsize=64)

    def resolve(self, sheet_name: str) -> int | None:
        if sheet_name in self.cache:
            return self.cache[sheet_name]
        try:
            properties = self.client.sheet_properties()
        except DataAccessError as e:
            log.error(f"Не удалось получить id листа '{sheet_name}': {e}")
            return None
        for props in properties:
            if props.get('title') == sheet_name and props.get('sheetId') is not None:
                self.cache[sheet_name] = props['sheetId']
                log.debug(f"Лист '{sheet_name}' имеет id {props['sheetId']}.")
                return props['sheetId']
        log.error(f"Лист '{sheet_name}' не найден в таблице.")
        return None

    def invalidate(self, sheet_name: str | None = None):
        if sheet_name is None:
            self.cache.clear()
        else:
            self.cache.pop(sheet_name, None)
