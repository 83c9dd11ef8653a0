from pydantic import BaseModel
import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    # Document store
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "portfolio")

    # Shared cache
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_PASSWORD: str | None = os.getenv("REDIS_PASSWORD")
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    CACHE_PREFIX: str = os.getenv("CACHE_PREFIX", "portfolio")

    # Admin auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "secret")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    # pbkdf2_sha256 hash from utils.hash_password
    ADMIN_PASSWORD_HASH: str | None = os.getenv("ADMIN_PASSWORD_HASH")

    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS"), ["*"])
    REVALIDATION_SECRET: str | None = os.getenv("REVALIDATION_SECRET")
    RECAPTCHA_SECRET_KEY: str | None = os.getenv("RECAPTCHA_SECRET_KEY")

    # SES Email Config
    AWS_ACCESS_KEY_ID: str | None = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: str | None = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_REGION: str | None = os.getenv("AWS_REGION")
    SES_SENDER_EMAIL: str | None = os.getenv("SES_SENDER_EMAIL")
    CONTACT_NOTIFY_EMAIL: str | None = os.getenv("CONTACT_NOTIFY_EMAIL")

    # Default byline for posts stored without an author
    SITE_AUTHOR_NAME: str = os.getenv("SITE_AUTHOR_NAME", "Site Owner")
    SITE_AUTHOR_EMAIL: str = os.getenv("SITE_AUTHOR_EMAIL", "owner@example.com")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
