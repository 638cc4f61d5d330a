"""
Application settings
Read from environment variables and an optional .env file
"""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Kos Hunter"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./kosrent.db"

    # JWT
    SECRET_KEY: str = "kos-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Invoices
    INVOICE_DIR: str = "./public/invoices"
    INVOICE_URL_PREFIX: str = "/uploads/invoices"

    # Pricing
    DAYS_PER_MONTH: int = 30

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
