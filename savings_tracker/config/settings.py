"""
Configuration Management for Savings Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Thresholds and palettes are consumed by several modules, so they
live in one place and are validated once at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from savings_tracker.models.entities import Frequency


class StorageSettings(BaseSettings):
    """Local key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".tracker_data"),
        description="Directory holding one JSON file per stored key"
    )

    # Keys within the store
    goals_key: str = Field(
        default="goals_data",
        description="Key for the savings goals list"
    )
    payments_key: str = Field(
        default="payments_data",
        description="Key for the scheduled payments list"
    )
    wishlist_key: str = Field(
        default="wishlist_data",
        description="Key for the wishlist items list"
    )
    schema_version_key: str = Field(
        default="schema_version",
        description="Key recording which data migrations have run"
    )

    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a file write is attempted before failing"
    )


class ScheduleSettings(BaseSettings):
    """
    Due-date and planning configuration.

    Two "due soon" windows are in use: the wider one drives list
    filtering and the dashboard's urgent bucket, the narrower one
    drives card emphasis.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_SCHEDULE_",
        extra="ignore"
    )

    list_due_soon_days: int = Field(
        default=7,
        ge=0,
        le=60,
        description="Days ahead that count as 'due soon' for lists and the dashboard"
    )
    card_due_soon_days: int = Field(
        default=3,
        ge=0,
        le=60,
        description="Days ahead that count as 'due soon' for card emphasis"
    )
    default_projection_frequency: Frequency = Field(
        default=Frequency.BI_WEEKLY,
        description="Frequency pre-selected in the planning form"
    )
    default_projection_horizon_months: int = Field(
        default=1,
        ge=1,
        le=120,
        description="Months ahead of today pre-filled as the planning target date"
    )


class DisplaySettings(BaseSettings):
    """Presentation configuration (currency symbol and color palettes)."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_DISPLAY_",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        description="Symbol placed before formatted amounts"
    )
    goal_palette: str = Field(
        default="rose,sky,amber,emerald,indigo,purple",
        description="Comma-separated color tags assigned to new goals in rotation"
    )
    payment_palette: str = Field(
        default="teal,cyan,blue,lime,fuchsia,pink",
        description="Comma-separated color tags assigned to new payments in rotation"
    )

    @field_validator('goal_palette', 'payment_palette')
    @classmethod
    def validate_palette(cls, v: str) -> str:
        """A palette needs at least one tag."""
        if not [tag for tag in v.split(",") if tag.strip()]:
            raise ValueError("Palette must contain at least one color tag")
        return v

    @property
    def goal_colors(self) -> list[str]:
        """Get the goal palette as a list."""
        return [tag.strip() for tag in self.goal_palette.split(",") if tag.strip()]

    @property
    def payment_colors(self) -> list[str]:
        """Get the payment palette as a list."""
        return [tag.strip() for tag in self.payment_palette.split(",") if tag.strip()]


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Each property builds its group fresh from the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def schedule(self) -> ScheduleSettings:
        return ScheduleSettings()

    @property
    def display(self) -> DisplaySettings:
        return DisplaySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Settings shared by the whole process.

    Only the root is cached; each group re-reads the environment when accessed.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Instantiate every settings group and report which ones fail.

    Returns {group_name: is_valid}, plus {group_name}_error for failures.
    Run at startup so a bad environment variable surfaces early.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "schedule", "display", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
