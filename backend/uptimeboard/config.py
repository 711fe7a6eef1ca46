"""Application configuration from environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Base URL of the external monitor store
    store_url: str = "http://localhost:54321"

    # API key for the store (sent as bearer token and apikey header)
    store_api_key: Optional[str] = None

    # Per-request timeout for store calls, no retries
    store_timeout_seconds: float = 10.0

    # Monitor type catalog: 'remote' fetches from the store, 'builtin' serves the static list
    monitor_types_source: str = "remote"

    # Whether the account may select premium monitor types
    premium_entitled: bool = False

    # Web server port
    web_port: int = 8000

    log_level: str = "INFO"

    class Config:
        env_prefix = ""
        case_sensitive = False


settings = Settings()


def get_store_headers() -> dict:
    """Get the headers sent with every store request."""
    headers = {"Content-Type": "application/json"}
    if settings.store_api_key:
        headers["apikey"] = settings.store_api_key
        headers["Authorization"] = f"Bearer {settings.store_api_key}"
    return headers
