from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Literal

class Settings(BaseSettings):
    PORT: int = 8000
    STORAGE_BACKEND: Literal["memory", "firestore"] = "memory"
    DATABASE_URL: str = ""
    FIREBASE_CREDENTIALS: str = "credentials.json"
    FIRESTORE_DATABASE_ID: str = "kingx"
    SEED_DEMO_DATA: bool = True

    AI_API_BASE_URL: str = "https://oi-server.onrender.com"
    AI_API_KEY: str = ""
    AI_CUSTOMER_ID: str = ""
    AI_MODEL: str = "openrouter/anthropic/claude-sonnet-4"
    AI_TIMEOUT_SECONDS: float = 30.0

    CURRENCY: str = "USD"
    DRIVER_PAYOUT_RATE: float = 0.7

    model_config = ConfigDict(env_file='.env', extra='ignore')

settings = Settings()
