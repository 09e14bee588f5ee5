from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # SQLAlchemy async driver used for every connect call
    DB_DRIVER: str = "mysql+aiomysql"
    DB_PORT: Optional[int] = None
    SQL_ECHO: bool = False

    DEFAULT_PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 1000

    CORS_ORIGINS: List[str] = ["*"]
    STATIC_DIR: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a single instance of the settings to use everywhere
settings = Settings()
