import os
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Определяем базовую директорию проекта
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # --- Таблица и листы ---
    GOOGLE_SHEETS_ID: str | None = None
    PRODUCTS_SHEET_NAME: str | None = "Products"
    USERS_SHEET_NAME: str | None = "Users"
    SALES_SHEET_NAME: str | None = "SalesHistory"

    # --- Доступ на запись (сервисный аккаунт) ---
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    # Альтернатива паре email/ключ: JSON-файл сервисного аккаунта
    GOOGLE_CREDENTIALS_FILE: str | None = None

    # --- Доступ только на чтение ---
    GOOGLE_SHEETS_API_KEY: str | None = None

    LOG_LEVEL: str = "INFO"

    # Политика смены пароля
    MIN_PASSWORD_LENGTH: int = 6

    @field_validator("GOOGLE_PRIVATE_KEY", mode="before")
    @classmethod
    def unescape_private_key(cls, v):
        """В .env ключ обычно хранится в одну строку с литеральными '\\n'."""
        if isinstance(v, str):
            return v.replace("\\n", "\n")
        return v

    @property
    def has_service_account(self) -> bool:
        if self.GOOGLE_SERVICE_ACCOUNT_EMAIL and self.GOOGLE_PRIVATE_KEY:
            return True
        return bool(self.GOOGLE_CREDENTIALS_FILE) and os.path.exists(self.GOOGLE_CREDENTIALS_FILE)

    def missing_values(self) -> list[str]:
        """Возвращает имена обязательных настроек, которые не заданы."""
        missing = [
            name for name in ("GOOGLE_SHEETS_ID", "PRODUCTS_SHEET_NAME", "USERS_SHEET_NAME", "SALES_SHEET_NAME")
            if not getattr(self, name)
        ]
        if not (self.has_service_account or self.GOOGLE_SHEETS_API_KEY):
            missing.append("GOOGLE_SERVICE_ACCOUNT_EMAIL/GOOGLE_PRIVATE_KEY или GOOGLE_SHEETS_API_KEY")
        return missing


settings = Settings()
