# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./pos_backoffice.db"

    FRONTEND_URL: str = "http://localhost:3000"

    # Where the client is sent after a committed sale, and how long it waits first
    SALES_REDIRECT_PATH: str = "/admin/pos/sales"
    SALES_REDIRECT_DELAY_MS: int = 2000

    # Rendered sale invoices (PDF)
    INVOICE_STORAGE_DIR: str = "storage/invoices"
    CURRENCY_SYMBOL: str = "R"

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
