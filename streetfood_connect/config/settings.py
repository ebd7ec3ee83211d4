# streetfood_connect/config/settings.py
"""
Runtime configuration, read once from the environment (.env supported).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Application
    APP_NAME: str = "StreetFood Connect"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = _bool("DEBUG")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if _bool("DEBUG") else "INFO").upper()
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000")

    # Gateway: "local" (SQLAlchemy document store) or "firebase" (REST APIs)
    GATEWAY_BACKEND: str = os.getenv("GATEWAY_BACKEND", "local").strip().lower()

    # Local document store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./streetfood.db")
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Firebase
    FIREBASE_API_KEY: str = os.getenv("FIREBASE_API_KEY", "").strip()
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "").strip()
    HTTP_TIMEOUT: int = int(os.getenv("HTTP_TIMEOUT", "15"))
    SUBSCRIPTION_POLL_SECONDS: float = float(os.getenv("SUBSCRIPTION_POLL_SECONDS", "5"))

    # Sessions
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "session")
    SESSION_COOKIE_SECURE: bool = _bool("SESSION_COOKIE_SECURE")
    SESSION_IDLE_MINUTES: int = int(os.getenv("SESSION_IDLE_MINUTES", "120"))

    # Presentation
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")
    TOP_CUSTOMERS_LIMIT: int = 3
    COMPARE_LIMIT: int = 3

    def require_firebase(self) -> None:
        if not all([self.FIREBASE_API_KEY, self.FIREBASE_PROJECT_ID]):
            raise RuntimeError(
                "Missing Firebase env vars (FIREBASE_API_KEY/FIREBASE_PROJECT_ID) for GATEWAY_BACKEND=firebase."
            )


settings = Settings()
