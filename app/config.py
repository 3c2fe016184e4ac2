# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads layered configuration using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.ticketmaster.token)
#
# Sources, lowest to highest priority:
# 1. Field defaults declared below
# 2. config/Default.toml
# 3. config/<Environment>.toml, where SERVER_ENV selects the environment
# 4. .env file in project root (if exists)
# 5. Process environment variables (nested keys use "__",
#    e.g. TICKETMASTER__TOKEN)
#
# CONFIG_DIR can point the loader at another config directory.
# =============================================================================

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"
BASE_CONFIG_FILE = "Default.toml"


class Environment(str, Enum):
    """
    Deployment profile.

    Selects the environment config file and controls how much error
    detail is rendered (everything except PRODUCTION shows details).
    """
    DEVELOPMENT = "Development"
    TESTING = "Testing"
    PRODUCTION = "Production"

    @classmethod
    def from_name(cls, name: str) -> "Environment":
        """
        Match an environment name case-insensitively.

        Accepts the full names and the dev/test/prod short forms.

        Raises:
            ValueError: If the name is not a known environment
        """
        aliases = {
            "dev": cls.DEVELOPMENT,
            "development": cls.DEVELOPMENT,
            "test": cls.TESTING,
            "testing": cls.TESTING,
            "prod": cls.PRODUCTION,
            "production": cls.PRODUCTION,
        }
        try:
            return aliases[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unrecognized environment: {name!r}. "
                "Set SERVER_ENV to Development, Testing or Production"
            ) from None


def selected_environment() -> Environment:
    """Environment named by SERVER_ENV (Development when unset)."""
    return Environment.from_name(os.environ.get("SERVER_ENV", "Development"))


def config_dir() -> Path:
    """Directory holding Default.toml and the per-environment files."""
    return Path(os.environ.get("CONFIG_DIR", DEFAULT_CONFIG_DIR))


# =============================================================================
# Settings Sections
# =============================================================================

class ServerSettings(BaseModel):
    """Where uvicorn binds when the app is run directly."""
    url: str = Field(default="127.0.0.1", description="Host to bind the server to")
    port: int = Field(default=3000, ge=1, le=65535, description="Port for the server")


class LogSettings(BaseModel):
    level: str = Field(default="INFO", description="Root logging level")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


class TicketmasterSettings(BaseModel):
    """Credentials and transport options for the Discovery API."""
    token: str = Field(default="", description="Discovery API consumer key")
    secret: str = Field(default="", description="Discovery API consumer secret")
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for a single outbound request (no retries)"
    )


class RateLimitSettings(BaseModel):
    """
    Per-client token bucket.

    A client may burst up to `burst_size` requests; tokens refill at
    `per_second` tokens per second.
    """
    enabled: bool = True
    per_second: float = Field(default=2.0, gt=0)
    burst_size: int = Field(default=8, ge=1)


class Settings(BaseSettings):
    """
    Application settings loaded from defaults, TOML files and the environment.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    env: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment, always taken from SERVER_ENV"
    )

    autoreload_templates: bool = Field(
        default=True,
        description="Rebuild the template environment when template files change"
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    ticketmaster: TicketmasterSettings = Field(default_factory=TicketmasterSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    # -------------------------------------------------------------------------
    # HTTP / Filesystem
    # -------------------------------------------------------------------------

    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    template_dir: Path = Field(
        default=PROJECT_ROOT / "static" / "html",
        description="Directory containing the Jinja2 templates"
    )

    static_dir: Path = Field(
        default=PROJECT_ROOT / "static",
        description="Root served under /static"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        env_nested_delimiter="__",
        case_sensitive=False,
        # Unrelated keys in .env or the environment are not errors
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def use_selected_environment(cls, data):
        # SERVER_ENV is the only source; a bare ENV variable is ignored
        if isinstance(data, dict):
            data = {**data, "env": selected_environment()}
        return data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Order the sources, highest priority first.

        Missing TOML files contribute nothing.
        """
        directory = config_dir()
        environment = selected_environment()
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=directory / f"{environment.value}.toml"),
            TomlConfigSettingsSource(settings_cls, toml_file=directory / BASE_CONFIG_FILE),
        )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == Environment.PRODUCTION

    @property
    def debug(self) -> bool:
        """Error pages include exception details outside production."""
        return not self.is_production


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures the config files are read and validated once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
