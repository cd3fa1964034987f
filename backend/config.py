# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # E-invoice provider; an empty URL means the provider is simulated
    INVOICE_API_URL: Optional[str] = None
    INVOICE_API_KEY: str = ""
    INVOICE_API_SECRET: str = ""
    INVOICE_TIMEOUT_SECONDS: float = 10.0
    INVOICE_SIMULATED_LATENCY_SECONDS: float = 1.0
    LOCAL_INVOICE_PREFIX: str = "NK"

    # Marketplace (Shopee) inventory sync
    MARKETPLACE_API_URL: Optional[str] = None
    SHOPEE_API_KEY: str = ""
    SHOPEE_SHOP_ID: str = ""
    MARKETPLACE_TIMEOUT_SECONDS: float = 30.0
    MARKETPLACE_SIMULATED_LATENCY_SECONDS: float = 1.5

    # Product description generation
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT_SECONDS: float = 20.0

    # Load the demo catalog and members on startup
    SEED_DEMO_DATA: bool = True

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra = "ignore"

settings = Settings()
