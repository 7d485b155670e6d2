from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"

    SECRET_KEY: str = "dev-secret-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 600  # 10 minutes

    IDEMPOTENCY_TTL: int = 300  # 5 minutes
    RANKING_CACHE_TTL: int = 60   # 60 seconds

    WEBHOOK_URL: Optional[str] = None
    WEBHOOK_TIMEOUT: int = 10
    WEBHOOK_RETRIES: int = 3

    # Marketplace business defaults
    DEFAULT_COMMISSION_PERCENT: float = 60.0
    DEFAULT_DEPOSIT_PERCENT: int = 25
    VAT_RATE: float = 0.20
    REMAINDER_DUE_DAYS: int = 14
    BLIND_WINDOW_DAYS: int = 14
    DEFAULT_EVENT_DURATION_HOURS: float = 8.0

    API_TITLE: str = "SiteMedic Marketplace Pricing"
    API_DESCRIPTION: str = "Quote ranking, minimum rates, award maths and attribution rules"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
