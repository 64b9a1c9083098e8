# helpdesk/config/settings.py
# Runtime configuration for the helpdesk service

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings read from the environment"""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./helpdesk.db")
    DB_SSLMODE = os.getenv("DB_SSLMODE", "require")

    # Tokens
    # Required; see validate()
    SECRET_KEY = os.getenv("SECRET_KEY")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

    # Password hashing cost
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

    # HTTP
    CORS_ORIGINS = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    )

    # Registration: restrict emails to one domain when set (e.g. "example.com")
    ALLOWED_EMAIL_DOMAIN = os.getenv("ALLOWED_EMAIL_DOMAIN", "")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Split the comma-separated origin list"""
        return [origin.strip() for origin in cls.CORS_ORIGINS.split(",") if origin.strip()]

    @classmethod
    def validate(cls):
        """Refuse to start with settings that would leave the API open"""
        if not cls.SECRET_KEY:
            raise RuntimeError("SECRET_KEY environment variable must be set")


settings = Settings()
