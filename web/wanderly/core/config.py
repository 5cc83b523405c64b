import os
from decimal import Decimal
from typing import Optional, List
from functools import lru_cache


class Settings:
    """Application settings read from the environment"""

    # Database
    DB_DSN: str = os.getenv("DB_DSN", "")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = int(os.getenv("JWT_ACCESS_TTL", "900"))  # 15 minutes
    REFRESH_TOKEN_EXPIRE_SECONDS: int = int(os.getenv("JWT_REFRESH_TTL", str(60 * 60 * 24 * 30)))  # 30 days

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = []
    CORS_ALLOW_CREDENTIALS: bool = True

    # Rate Limiting
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")

    # Public URLs
    # API_BASE_URL is where the payment redirect pages look up transactions,
    # FRONTEND_URL is where gateway callbacks send the browser afterwards.
    API_BASE_URL: Optional[str] = os.getenv("API_BASE_URL") or None
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Business Rules
    DEFAULT_BOOKING_FEE_PCT: Decimal = Decimal(os.getenv("DEFAULT_BOOKING_FEE_PCT", "20"))
    CURRENCY: str = os.getenv("CURRENCY", "BDT")

    # SSLCommerz
    SSLCOMMERZ_STORE_ID: str = os.getenv("SSLCOMMERZ_STORE_ID", "")
    SSLCOMMERZ_STORE_PASSWORD: str = os.getenv("SSLCOMMERZ_STORE_PASSWORD", "")
    SSLCOMMERZ_SANDBOX: bool = os.getenv("SSLCOMMERZ_SANDBOX", "true").lower() == "true"
    PAYMENT_TIMEOUT_SECONDS: float = float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "20"))

    def __init__(self):
        self._validate()
        self._parse_cors_origins()

    def _validate(self):
        """Validate required settings"""
        if not self.SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable must be set")
        if not self.DB_DSN:
            raise ValueError("DB_DSN environment variable must be set")
        if not (Decimal("0") <= self.DEFAULT_BOOKING_FEE_PCT <= Decimal("100")):
            raise ValueError("DEFAULT_BOOKING_FEE_PCT must be between 0 and 100")

    def _parse_cors_origins(self):
        """Parse CORS origins from environment"""
        raw_origins = os.getenv("CORS_ALLOW_ORIGINS") or self.FRONTEND_URL or "*"

        if raw_origins.strip() == "*":
            self.CORS_ALLOW_ORIGINS = ["*"]
            self.CORS_ALLOW_CREDENTIALS = False  # Security: wildcard forbids credentials
        else:
            self.CORS_ALLOW_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]
            self.CORS_ALLOW_CREDENTIALS = True

    @property
    def sslcommerz_base_url(self) -> str:
        if self.SSLCOMMERZ_SANDBOX:
            return "https://sandbox.sslcommerz.com"
        return "https://securepay.sslcommerz.com"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
