# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./database_sushi.db"

    # Store access limits
    DB_TIMEOUT_SECONDS: int = 15
    STORE_RETRY_ATTEMPTS: int = 3
    STORE_RETRY_BACKOFF_SECONDS: float = 0.05

    # Rendered invoice documents (served as static files)
    INVOICE_STORAGE_DIR: str = "storage/invoices"
    INVOICE_URL_PREFIX: str = "/invoices"

    FRONTEND_URL: str = "http://localhost:5173"

    # Seller block printed on invoices
    COMPANY_NAME: str = "SushiBE"
    COMPANY_ADDRESS: str = "123 Sushi Street, City"
    COMPANY_EMAIL: str = "support@example.com"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
