"""
WatchCompile Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


class WatcherSettings(BaseSettings):
    """Polling watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    poll_interval_ms: int = Field(
        default=100, ge=1, le=60000, description="Delay between compile passes"
    )
    log: bool = Field(default=False, description="Log a line per compiled file")
    ignore_patterns: Annotated[list[str], NoDecode] = Field(
        default=[".git", ".svn", ".DS_Store"],
        description="Glob patterns matched against each path component",
    )

    @field_validator("ignore_patterns", mode="before")
    @classmethod
    def parse_ignore_patterns(cls, v: str | list[str]) -> list[str]:
        """Parse ignore patterns from comma-separated string or list."""
        return _split_csv(v)


class CompilerSettings(BaseSettings):
    """Compiler backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="COMPILER_")

    type: str = Field(default="babel", description='"ts" selects TypeScript')
    retain_lines: bool = Field(default=True)
    allowed_extensions: Annotated[list[str], NoDecode] = Field(default=[".js", ".ts"])
    node_binary: str = Field(default="node")
    project_root: Path | None = Field(
        default=None, description="Directory node_modules are resolved from"
    )
    timeout_seconds: float | None = Field(default=None, ge=0.1)

    ts_target: str = Field(default="ES5")
    ts_module: str = Field(default="CommonJS")

    babel_presets: Annotated[list[str], NoDecode] = Field(
        default=["@babel/preset-env"]
    )
    babel_plugins: Annotated[list[str], NoDecode] = Field(
        default=["@babel/plugin-transform-runtime"]
    )
    babel_loose: bool = Field(default=True)

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def parse_allowed_extensions(cls, v: str | list[str]) -> list[str]:
        """Parse extensions and make sure each one starts with a dot."""
        return [e if e.startswith(".") else f".{e}" for e in _split_csv(v)]

    @field_validator("babel_presets", "babel_plugins", mode="before")
    @classmethod
    def parse_babel_lists(cls, v: str | list[str]) -> list[str]:
        """Parse preset and plugin names from comma-separated string or list."""
        return _split_csv(v)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="WatchCompile")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    compiler: CompilerSettings = Field(default_factory=CompilerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
