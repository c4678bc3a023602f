from functools import lru_cache
from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database settings
    DB_URL: str = "sqlite+aiosqlite:///./expenses.db"
    DB_BACKEND: Literal["orm", "sql"] = "orm"  # Store adapter picked at startup
    DB_ECHO: bool = False

    # API settings
    API_VERSION: str = "v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Reports and listing
    DEFAULT_PAGE_SIZE: int = 10
    SUMMARY_TRAILING_MONTHS: int = 6
    LIST_STATE_DIR: Optional[str] = None  # Memory storage when unset

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        validate_default = True

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.DB_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()
