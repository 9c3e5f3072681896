from typing import ClassVar
from pydantic import Field
from pos_sheets.models.base import BaseSheetModel
from pos_sheets.sheets.codec import cell_text, is_valid_color, optional_text, parse_color
from pos_sheets.sheets.schema import USER_COLUMN_MAP
from pos_sheets.utils.logger import log

# Поля, которые пользователь может менять в своем профиле
PROFILE_FIELDS = ('first_name', 'middle_name', 'last_name')


class User(BaseSheetModel):
    COLUMN_MAP: ClassVar[dict[str, int]] = USER_COLUMN_MAP

    id: str = ""
    login: str
    password_hash: str = Field("", alias="passwordHash")
    first_name: str | None = Field(None, alias="firstName")
    middle_name: str | None = Field(None, alias="middleName")
    last_name: str | None = Field(None, alias="lastName")
    position: str | None = None
    icon_color: str | None = Field(None, alias="iconColor")

    @property
    def has_valid_icon_color(self) -> bool:
        return is_valid_color(self.icon_color)

    def public_view(self) -> "User":
        """Копия без хэша пароля, для передачи наружу."""
        return self.model_copy(update={'password_hash': ""})

    @classmethod
    def from_sheet_row(cls, row: list, row_number: int | None = None) -> "User | None":
        login = cell_text(row, cls.COLUMN_MAP['login']) if row else ""
        if not login:
            log.debug(f"Строка {row_number} листа пользователей пустая или без логина, пропускаю.")
            return None
        return cls(
            id=cell_text(row, cls.COLUMN_MAP['id']),
            login=login,
            password_hash=cell_text(row, cls.COLUMN_MAP['password_hash']),
            first_name=optional_text(cell_text(row, cls.COLUMN_MAP['first_name'])),
            middle_name=optional_text(cell_text(row, cls.COLUMN_MAP['middle_name'])),
            last_name=optional_text(cell_text(row, cls.COLUMN_MAP['last_name'])),
            position=optional_text(cell_text(row, cls.COLUMN_MAP['position'])),
            icon_color=parse_color(cell_text(row, cls.COLUMN_MAP['icon_color'])),
        )

    def sheet_values(self) -> dict[str, str]:
        return {
            'id': self.id,
            'login': self.login,
            'password_hash': self.password_hash,
            'first_name': self.first_name,
            'middle_name': self.middle_name,
            'last_name': self.last_name,
            'position': self.position,
            'icon_color': self.icon_color,
        }
