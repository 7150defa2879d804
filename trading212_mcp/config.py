from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

BASE_URLS = {
    "demo": "https://demo.trading212.com/api/v0",
    "live": "https://live.trading212.com/api/v0",
}


class Settings(BaseSettings):
    # App
    APP_NAME: str = "trading212-mcp"

    # Trading 212
    TRADING212_API_KEY: str = ""
    TRADING212_ENVIRONMENT: Literal["demo", "live"] = "demo"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Transport
    TRADING212_TRANSPORT: Literal["stdio", "http"] = "stdio"
    TRADING212_MCP_PORT: int = 3012
    TRADING212_MCP_HOST: str = "0.0.0.0"
    TRADING212_MCP_PATH: str = "/mcp"
    MAX_BODY_BYTES: int = 1024 * 1024  # 1 MB

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["console", "json"] = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
