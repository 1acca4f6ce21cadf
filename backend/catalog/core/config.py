import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"
    DB_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: int = 30

    # Catalog
    STORE_BACKEND: str = "sql"  # sql | memory
    SEED_ON_STARTUP: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )


settings = Settings()


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
