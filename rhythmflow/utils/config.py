"""
Configuration management with schema validation.
Settings are read from the environment (and a local .env file).
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .exceptions import ConfigError


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = Field(default="json", pattern="^(json|text)$")
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class CatalogSettings(BaseModel):
    api_base_url: str = "https://api.deezer.com"
    connect_timeout: float = 5.0
    read_timeout: float = 15.0

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


class Settings(BaseModel):
    """Main configuration model"""
    token_secret: str = Field(min_length=1)
    data_dir: Path = Path("data")
    environment: str = "production"
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    host: str = "0.0.0.0"
    port: int = 5000
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    @property
    def accounts_file(self) -> Path:
        return self.data_dir / "accounts.json"

    @property
    def collections_file(self) -> Path:
        return self.data_dir / "collections.json"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    TOKEN_SECRET is required: a server that would sign tokens with a
    guessable key refuses to start instead.
    """
    load_dotenv()

    secret = _env("TOKEN_SECRET")
    if not secret:
        raise ConfigError("TOKEN_SECRET must be set to sign session tokens")

    raw = {
        "token_secret": secret,
        "data_dir": _env("DATA_DIR", "data"),
        "environment": _env("ENVIRONMENT", "production"),
        "bcrypt_rounds": _env("BCRYPT_ROUNDS", "10"),
        "host": _env("WEB_HOST", "0.0.0.0"),
        "port": _env("WEB_PORT", "5000"),
        "catalog": {
            "api_base_url": _env("CATALOG_API_URL", "https://api.deezer.com"),
            "connect_timeout": _env("CATALOG_CONNECT_TIMEOUT", "5"),
            "read_timeout": _env("CATALOG_READ_TIMEOUT", "15"),
        },
        "logging": {
            "level": _env("LOG_LEVEL", "INFO"),
            "format": _env("LOG_FORMAT", "json"),
            "file_path": _env("LOG_FILE"),
        },
    }
    origins = _env("CORS_ORIGINS")
    if origins:
        raw["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    try:
        return Settings(**raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")
