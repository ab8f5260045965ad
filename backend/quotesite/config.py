"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when the server cannot derive its runtime configuration."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # "development" switches /src/ to live builds, anything else serves the embedded bundle
    ENV: str = ""
    # Substituted into the frontend as process.env.NODE_ENV
    NODE_ENV: str = ""

    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Assets
    ASSET_PREFIX: str = "/src/"
    ASSET_SOURCE_DIR: str = "backend/quotesite/assets/src"
    # esbuild itself is resolved from ASSET_SOURCE_DIR/node_modules
    NODE_BINARY: str = "node"
    POSTCSS_PATH: str = "node_modules/.bin/postcss"

    @property
    def is_development(self) -> bool:
        return self.ENV == "development"

    @property
    def addr(self) -> str:
        return f"{self.HOST}:{self.PORT}"


def working_dir() -> Path:
    """Return the process working directory or raise ConfigurationError."""
    try:
        return Path.cwd()
    except OSError as e:
        raise ConfigurationError(f"Error getting working directory: {e}") from e


def asset_source_dir(settings: Settings) -> Path:
    """Resolve the frontend source tree relative to the working directory."""
    source = Path(settings.ASSET_SOURCE_DIR)
    if not source.is_absolute():
        source = working_dir() / source
    return source


@lru_cache
def get_settings() -> Settings:
    return Settings()
