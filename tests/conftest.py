import re
import pytest
from cachetools import Cache
from gspread.utils import a1_to_rowcol

from pos_sheets.auth.passwords import hash_password
from pos_sheets.config.settings import settings
from pos_sheets.sheets.client import GoogleSheetsClient
from pos_sheets.sheets.locator import SheetLocator
from pos_sheets.sheets.schema import ORDER_HEADERS, PRODUCT_HEADERS, USER_HEADERS

ADMIN_PASSWORD = "s3cret-admin"
ADMIN_HASH = hash_password(ADMIN_PASSWORD)

RANGE_PATTERN = re.compile(r"^'(?P<title>(?:[^']|'')+)'!(?P<c1>[A-Z]+)(?P<r1>\d*):(?P<c2>[A-Z]+)(?P<r2>\d*)$")


def _column_index(letters: str) -> int:
    return a1_to_rowcol(f"{letters}1")[1] - 1


def _trim(row: list) -> list:
    row = list(row)
    while row and row[-1] in ("", None):
        row.pop()
    return row


class FakeSpreadsheet:
    """
    Таблица в памяти с тем же диапазонным API, что у gspread.Spreadsheet.
    Строки листа хранятся вместе с заголовком, как в настоящей таблице.
    """

    def __init__(self, sheets: dict[str, list[list]], sheet_ids: dict[str, int] | None = None):
        self.sheets = {title: [list(row) for row in rows] for title, rows in sheets.items()}
        self.sheet_ids = sheet_ids or {title: 1000 + i for i, title in enumerate(self.sheets)}
        self.calls: list[tuple[str, object]] = []
        self.fail_on: set[str] = set()

    def _check(self, method: str):
        if method in self.fail_on:
            raise RuntimeError(f"{method}: 503 backend unavailable")

    def _parse(self, range_name: str):
        match = RANGE_PATTERN.match(range_name)
        assert match, f"неожиданный диапазон {range_name}"
        title = match['title'].replace("''", "'")
        start_row = int(match['r1']) if match['r1'] else 1
        end_row = int(match['r2']) if match['r2'] else None
        return title, _column_index(match['c1']), start_row, _column_index(match['c2']), end_row

    def writes(self) -> list[tuple[str, object]]:
        return [call for call in self.calls if call[0] != 'values_get' and call[0] != 'fetch_sheet_metadata']

    def values_get(self, range_name, params=None):
        self.calls.append(('values_get', range_name))
        self._check('values_get')
        title, c1, r1, c2, r2 = self._parse(range_name)
        rows = self.sheets[title][r1 - 1:r2]
        values = [_trim(row[c1:c2 + 1]) for row in rows]
        while values and not values[-1]:
            values.pop()
        response = {'range': range_name}
        if values:
            response['values'] = values
        return response

    def values_append(self, range_name, params=None, body=None):
        self.calls.append(('values_append', body['values']))
        self._check('values_append')
        title, *_ = self._parse(range_name)
        rows = self.sheets[title]
        while rows and not _trim(rows[-1]):
            rows.pop()
        rows.extend(list(row) for row in body['values'])
        return {'updates': {'updatedRows': len(body['values'])}}

    def values_update(self, range_name, params=None, body=None):
        self.calls.append(('values_update', (range_name, body['values'])))
        self._check('values_update')
        title, c1, r1, _, _ = self._parse(range_name)
        rows = self.sheets[title]
        for offset, values in enumerate(body['values']):
            index = r1 - 1 + offset
            while len(rows) <= index:
                rows.append([])
            row = rows[index]
            row.extend([""] * (c1 + len(values) - len(row)))
            row[c1:c1 + len(values)] = values
        return {'updatedRows': len(body['values'])}

    def batch_update(self, body):
        self.calls.append(('batch_update', body['requests']))
        self._check('batch_update')
        by_id = {sheet_id: title for title, sheet_id in self.sheet_ids.items()}
        for request in body['requests']:
            dimension = request['deleteDimension']['range']
            rows = self.sheets[by_id[dimension['sheetId']]]
            del rows[dimension['startIndex']:dimension['endIndex']]
        return {'replies': [{} for _ in body['requests']]}

    def fetch_sheet_metadata(self, params=None):
        self.calls.append(('fetch_sheet_metadata', params))
        self._check('fetch_sheet_metadata')
        return {'sheets': [
            {'properties': {'sheetId': sheet_id, 'title': title}}
            for title, sheet_id in self.sheet_ids.items()
        ]}


@pytest.fixture
def product_rows():
    return [
        PRODUCT_HEADERS,
        ["Латте", "0,3 л", "165", "https://img/latte.jpg", "латте 0,3 medium"],
        ["Эспрессо", "", "100"],
        ["Латте", "0,2 л", "140,5"],
    ]


@pytest.fixture
def user_rows():
    return [
        USER_HEADERS,
        ["1", "barista", "plainsecret", "Анна", "", "Смирнова", "Бариста", "#32a852"],
        ["2", "admin", ADMIN_HASH, "Иван"],
    ]


@pytest.fixture
def order_rows():
    return [
        ORDER_HEADERS,
        ["order_1", "01.05.2024 10:00:00", "Латте (0,3 л) x2, Эспрессо x1", "Карта", "430", "Анна"],
        ["order_2", "02.05.2024 12:30:15", "Раф x1", "Наличные", "195,5", ""],
    ]


@pytest.fixture
def fake_spreadsheet(product_rows, user_rows, order_rows):
    return FakeSpreadsheet({
        settings.PRODUCTS_SHEET_NAME: product_rows,
        settings.USERS_SHEET_NAME: user_rows,
        settings.SALES_SHEET_NAME: order_rows,
    })


@pytest.fixture
def sheets_client(fake_spreadsheet):
    return GoogleSheetsClient(spreadsheet=fake_spreadsheet, can_write=True)


@pytest.fixture
def patch_tables(monkeypatch, sheets_client):
    """Подменяет клиента и локатор листов во всех модулях таблиц; кэш id листов свой на каждый тест."""
    locator = SheetLocator(sheets_client, cache=Cache(maxsize=8))
    for module in ('products', 'users', 'orders'):
        monkeypatch.setattr(f'pos_sheets.sheets.{module}.gs_client', sheets_client)
        monkeypatch.setattr(f'pos_sheets.sheets.{module}.sheet_locator', locator)
    return sheets_client


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD
