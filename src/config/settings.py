"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./convos.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 1800

    # JWT
    JWT_SECRET: str
    JWT_EXPIRE_MINUTES: int = 60

    # XMTP notification service
    NOTIFICATION_SERVER_URL: str
    XMTP_NOTIFICATION_SECRET: str

    # Expo push
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    EXPO_ACCESS_TOKEN: str = ""

    # Attachments (S3-compatible)
    ATTACHMENTS_ENDPOINT: str = "https://s3.fr-par.scw.cloud"
    ATTACHMENTS_REGION: str = "fr-par"
    ATTACHMENTS_BUCKET: str = ""
    ATTACHMENTS_ACCESS_KEY_ID: str = ""
    ATTACHMENTS_SECRET_ACCESS_KEY: str = ""
    ATTACHMENTS_URL_EXPIRE_SECONDS: int = 3600

    # App config
    MIN_APP_VERSION_IOS: str = "1.0.0"
    MIN_APP_VERSION_ANDROID: str = "1.0.0"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
