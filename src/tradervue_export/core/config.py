"""Configuration management.

Loads from an optional TOML config file + ``.env`` + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .timeutil import DEFAULT_REFERENCE_TZ


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ApiConfig(BaseModel):
    base_url: str = "https://app.tradervue.com/api/v1"
    page_size: int = 100  # Remote maximum per page
    min_request_interval: float = 0.2  # seconds between request starts
    max_retries: int = 3
    base_backoff: float = 1.0  # seconds; wait = base * 2**attempt
    timeout: float = 30.0  # seconds
    max_pages: int = 10_000  # Pagination backstop


class ExportConfig(BaseModel):
    reference_timezone: str = DEFAULT_REFERENCE_TZ
    discovery_start: str = "2010-01-01"  # Lower bound used to scan full history


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Environment variables and ``.env`` fill anything not given explicitly;
    values from the TOML file and explicit overrides (CLI flags) are passed
    as init kwargs and therefore win.
    """

    username: str = Field(
        default="",
        validation_alias=AliasChoices("TRADERVUE_USERNAME", "TVUE_USERNAME"),
    )
    password: str = Field(
        default="",
        validation_alias=AliasChoices("TRADERVUE_PASSWORD", "TVUE_PASSWORD"),
    )
    data_dir: str = "./data"
    user_agent: str = "tvue-cli (tradervue-export)"

    api: ApiConfig = Field(default_factory=ApiConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = SettingsConfigDict(
        env_prefix="TVUE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def require_credentials(self) -> None:
        """Enforce that API credentials are present."""
        if not self.username or not self.password:
            raise ConfigError(
                "credentials required: set --username/--password flags or "
                "TRADERVUE_USERNAME/TRADERVUE_PASSWORD in .env"
            )

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


_CREDENTIAL_FIELDS = ("username", "password")


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top. ``None`` values are
            ignored so unset CLI flags do not mask the environment.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        import tomli

        with open(path, "rb") as f:
            try:
                data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"invalid config file {path}: {exc}") from exc

    # Credentials are env-aliased; explicit values are applied after
    # validation so an environment alias cannot shadow them.
    explicit = {k: data.pop(k) for k in _CREDENTIAL_FIELDS if k in data}
    if overrides:
        explicit.update({k: v for k, v in overrides.items() if v is not None})

    settings = Settings(**data)
    if explicit:
        settings = settings.model_copy(update=explicit)
    return settings
