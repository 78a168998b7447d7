from decimal import Decimal
from pathlib import Path
from typing import List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticketing Checkout'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Logging
    LOG_LEVEL: str | None = None  # defaults to DEBUG when DEBUG else INFO
    LOG_TO_FILE: bool = False
    LOG_FILE_RETENTION: str = '7 days'

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'py_arch_lab'
    POSTGRES_PASSWORD: SecretStr = SecretStr('py_arch_lab')
    POSTGRES_DB: str = 'ticketing_checkout_db'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str | None = None  # full override, e.g. sqlite+aiosqlite:///./dev.db

    # Engine pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for alembic"""
        return self.DATABASE_URL_ASYNC.replace('+asyncpg', '').replace('+aiosqlite', '')

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    AUTH_COOKIE_NAME: str = 'checkout_session'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Checkout rules
    CURRENCY: str = 'usd'
    SERVICE_FEE_PER_TICKET: Decimal = Decimal('2.50')
    RESERVATION_WINDOW_MINUTES: int = 15
    CHECKOUT_MAX_ITEMS: int = 20
    CHECKOUT_MAX_TICKETS: int = 10

    # Lock reaper
    LOCK_REAPER_ENABLED: bool = True
    LOCK_REAPER_INTERVAL_SECONDS: float = 30.0
    LOCK_REAPER_BATCH_SIZE: int = 100

    # Payment gateway
    PAYMENT_GATEWAY_MODE: Literal['mock', 'stripe'] = 'mock'
    PAYMENT_GATEWAY_BASE_URL: str = 'https://api.stripe.com'
    PAYMENT_GATEWAY_SECRET_KEY: SecretStr = SecretStr('sk_test_change_me')
    PAYMENT_GATEWAY_TIMEOUT_SECONDS: float = 10.0
    PAYMENT_WEBHOOK_SECRET: SecretStr = SecretStr('whsec_test_change_me')
    PAYMENT_WEBHOOK_TOLERANCE_SECONDS: int = 300


settings = Settings()  # type: ignore
