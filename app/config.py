import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi.security import HTTPBearer

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")


class Settings:
    PROJECT_NAME = os.getenv("PROJECT_NAME", "Store Backend")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./store.db")

    JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASS = os.getenv("SMTP_PASS")
    FROM_EMAIL = os.getenv("FROM_EMAIL") or SMTP_USER
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", PROJECT_NAME)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # auth_middleware answers missing credentials with 401
    bearer_scheme = HTTPBearer(auto_error=False)
    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()
