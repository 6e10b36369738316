from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App settings
    APP_NAME: str = "Watch Ledger Back Office"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./watch_ledger.db")
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # JWT settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Password hashing
    HASH_ROUNDS: int = 12

    # CORS settings - the proxies are called straight from the browser
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
        "*"
    ]

    # Money formatting
    CURRENCY_SYMBOL: str = "$"

    # Business rules
    STALE_INVENTORY_DAYS: int = 60
    DASHBOARD_MONTHS: int = 6
    DEFAULT_COST_TYPES: List[str] = [
        "Shipping",
        "Authentication",
        "Repair",
        "Maintenance",
        "Insurance",
        "Storage",
        "Commission",
        "Other",
    ]

    # Image proxy
    IMAGE_PROXY_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "webp", "gif"]
    IMAGE_PROXY_CACHE_SECONDS: int = 86400  # 24h
    IMAGE_PROXY_USER_AGENT: str = "Mozilla/5.0 (compatible; WatchLedger/1.0)"
    IMAGE_PROXY_TIMEOUT: int = 15

    # LLM proxy - the key never leaves the server
    LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
    LLM_API_URL: str = "https://api.anthropic.com/v1/messages"
    LLM_API_VERSION: str = "2023-06-01"
    LLM_API_BETA: str = "interleaved-thinking-2025-05-07"
    LLM_TIMEOUT: int = 120

settings = Settings()
