import gspread
from pos_sheets.config.settings import Settings, settings
from pos_sheets.sheets.errors import ConfigurationError, TransportError
from pos_sheets.sheets.locator import SheetLocator
from pos_sheets.utils.logger import log

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
USER_ENTERED = {'valueInputOption': 'USER_ENTERED'}


def connect(config: Settings) -> tuple[gspread.Spreadsheet, bool]:
    """
    Открывает таблицу. Сервисный аккаунт дает доступ на запись,
    API-ключ только на чтение.
    """
    if config.GOOGLE_SERVICE_ACCOUNT_EMAIL and config.GOOGLE_PRIVATE_KEY:
        log.info("Авторизация в Google Sheets через сервисный аккаунт.")
        gc = gspread.service_account_from_dict(
            {
                'type': 'service_account',
                'client_email': config.GOOGLE_SERVICE_ACCOUNT_EMAIL,
                'private_key': config.GOOGLE_PRIVATE_KEY,
                'token_uri': 'https://oauth2.googleapis.com/token',
            },
            scopes=SCOPES,
        )
        return gc.open_by_key(config.GOOGLE_SHEETS_ID), True
    if config.has_service_account:
        log.info(f"Авторизация в Google Sheets через файл '{config.GOOGLE_CREDENTIALS_FILE}'.")
        gc = gspread.service_account(filename=config.GOOGLE_CREDENTIALS_FILE, scopes=SCOPES)
        return gc.open_by_key(config.GOOGLE_SHEETS_ID), True
    log.warning("Авторизация в Google Sheets по API-ключу: доступно только чтение.")
    gc = gspread.api_key(config.GOOGLE_SHEETS_API_KEY)
    return gc.open_by_key(config.GOOGLE_SHEETS_ID), False


class GoogleSheetsClient:
    """
    Тонкая обертка над диапазонным API таблицы.

    Конструктор никогда не бросает исключений: если настройки неполные или
    подключиться не удалось, клиент навсегда остается в состоянии
    "не настроен", а config_error хранит одно и то же сообщение для всех вызовов.
    Любая ошибка gspread/сети превращается в TransportError.
    """

    def __init__(self, spreadsheet=None, can_write: bool | None = None, config: Settings | None = None):
        self.spreadsheet = spreadsheet
        self.can_write = bool(can_write)
        self.config_error: str | None = None
        if spreadsheet is not None:
            return

        config = config or settings
        missing = config.missing_values()
        if missing:
            self.config_error = f"Google Sheets не настроен: не заданы {', '.join(missing)}."
            log.critical(self.config_error)
            return
        try:
            self.spreadsheet, has_service_account = connect(config)
            self.can_write = has_service_account if can_write is None else bool(can_write)
            log.info("Успешное подключение к Google Sheets.")
        except Exception as e:
            self.config_error = f"Ошибка подключения к Google Sheets: {e}"
            log.critical(self.config_error)

    @property
    def is_configured(self) -> bool:
        return self.config_error is None and self.spreadsheet is not None

    def ensure_configured(self):
        if not self.is_configured:
            raise ConfigurationError(self.config_error or "Google Sheets не настроен.")

    def get_values(self, range_name: str) -> list[list]:
        """Значения диапазона; пустые хвосты строк API не возвращает."""
        self.ensure_configured()
        try:
            response = self.spreadsheet.values_get(range_name)
        except Exception as e:
            raise TransportError(f"Ошибка чтения диапазона '{range_name}': {e}") from e
        return response.get('values', [])

    def append_rows(self, range_name: str, rows: list[list]) -> dict:
        self.ensure_configured()
        try:
            return self.spreadsheet.values_append(range_name, USER_ENTERED, {'values': rows})
        except Exception as e:
            raise TransportError(f"Ошибка добавления строк в '{range_name}': {e}") from e

    def update_values(self, range_name: str, rows: list[list]) -> dict:
        self.ensure_configured()
        try:
            return self.spreadsheet.values_update(range_name, USER_ENTERED, {'values': rows})
        except Exception as e:
            raise TransportError(f"Ошибка записи диапазона '{range_name}': {e}") from e

    def batch_update(self, requests: list[dict]) -> dict:
        self.ensure_configured()
        try:
            return self.spreadsheet.batch_update({'requests': requests})
        except Exception as e:
            raise TransportError(f"Ошибка пакетного обновления таблицы: {e}") from e

    def sheet_properties(self) -> list[dict]:
        """id и названия всех листов одним запросом метаданных."""
        self.ensure_configured()
        try:
            metadata = self.spreadsheet.fetch_sheet_metadata(
                params={'fields': 'sheets(properties(sheetId,title))'}
            )
        except Exception as e:
            raise TransportError(f"Ошибка чтения метаданных таблицы: {e}") from e
        return [sheet.get('properties', {}) for sheet in metadata.get('sheets', [])]


gs_client = GoogleSheetsClient()
sheet_locator = SheetLocator(gs_client)
