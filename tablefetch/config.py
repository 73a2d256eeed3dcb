"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_prefix": "TABLEFETCH_", "extra": "ignore"}

    fetch_timeout: float = 30.0
    user_agent: str = "tablefetch/0.1.0"
    follow_redirects: bool = True

    max_concurrency: int = 4
    page_size: int = 1000
    csv_delimiter: str = ","
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
