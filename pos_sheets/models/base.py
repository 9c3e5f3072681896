from typing import ClassVar
from pydantic import BaseModel, ConfigDict


class BaseSheetModel(BaseModel):
    """
    Базовая модель для всех сущностей, которые хранятся в Google Sheets.

    Наследник задает COLUMN_MAP (поле -> смещение колонки) и реализует
    from_sheet_row(); to_sheet_row() собирает строку по той же карте колонок.
    """
    model_config = ConfigDict(populate_by_name=True)

    COLUMN_MAP: ClassVar[dict[str, int]] = {}

    @classmethod
    def from_sheet_row(cls, row: list, row_number: int | None = None):
        raise NotImplementedError

    def sheet_values(self) -> dict[str, str]:
        """Значения ячеек по именам колонок. Переопределяется в наследниках."""
        raise NotImplementedError

    def to_sheet_row(self) -> list[str]:
        """
        Преобразует экземпляр модели в список для записи в Google Sheets.
        Незаполненные поля записываются пустой строкой, а не 'None'.
        """
        values = self.sheet_values()
        row = [""] * (max(self.COLUMN_MAP.values()) + 1)
        for field_name, offset in self.COLUMN_MAP.items():
            value = values.get(field_name)
            row[offset] = "" if value is None else value
        return row
