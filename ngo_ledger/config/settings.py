"""
Configuration Management for NGO Ledger

Every tunable lives here and is read from the environment (and .env)
through pydantic-settings. Nothing else in the package reads os.environ.

No setting is mandatory: without GEMINI_API_KEY the AI helpers fall back,
and storage defaults to ./data.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """
    Gemini LLM configuration.

    The API key is optional: without it the classification and
    statement-parsing agents run in fallback mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        extra="ignore"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key (unset = AI features disabled)"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=2048,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )
    request_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=120,
        description="Give up on a single model call after this many seconds"
    )
    max_statement_chars: int = Field(
        default=3000,
        ge=100,
        description="Raw statement text is truncated to this length before parsing"
    )

    @property
    def is_configured(self) -> bool:
        """True when an API key is present."""
        return bool(self.api_key and self.api_key.strip())


class StorageSettings(BaseSettings):
    """Local key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    data_dir: str = Field(
        default="./data",
        description="Directory holding the persisted JSON blobs"
    )

    # Fixed keys, one blob per store
    transactions_key: str = Field(
        default="ngo_transactions",
        description="Key of the transaction collection"
    )
    budget_key: str = Field(
        default="ngo_budget",
        description="Key of the budget line collection"
    )
    accounts_key: str = Field(
        default="ngo_chart_of_accounts",
        description="Key of the chart of accounts collection"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Warn if the data directory is a file (but don't fail - might be fixed later)."""
        if Path(v).is_file():
            import warnings
            warnings.warn(
                f"Storage data_dir {v} points at a file, not a directory."
            )
        return v


class AppSettings(BaseSettings):
    """
    Behaviour of the application itself (logging, display, undo).

    Variables are unprefixed, e.g. LOG_LEVEL, CURRENCY_CODE.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = console renderer)"
    )

    # Presentation boundary
    currency_code: str = Field(
        default="GHS",
        min_length=3,
        max_length=3,
        description="ISO currency code used when formatting amounts"
    )

    # Ledger behaviour
    undo_window_seconds: int = Field(
        default=5,
        ge=0,
        le=300,
        description="How long a deleted transaction can be restored"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Entry point for configuration: settings.gemini, settings.storage, settings.app.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sections are built on access so the environment is read fresh each time

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Shared Settings instance. Tests call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Startup report: which sections load, and whether AI is enabled.

    Failed sections carry a "<name>_error" message next to their flag.
    """
    results = {}

    settings = get_settings()

    try:
        results["gemini"] = settings.gemini.is_configured
        if not results["gemini"]:
            results["gemini_error"] = "GEMINI_API_KEY is not set"
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
