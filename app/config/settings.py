from pydantic import Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings built on Pydantic BaseSettings.
    Values are loaded automatically from environment variables and .env.
    """

    PROJECT_NAME: str = "Clinic Reception Core"
    VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ERROR)")
    LOG_FORMAT: str = Field("colored", description="Console log format: colored, json or plain")
    LOG_FILE: str | None = Field(None, description="Optional JSON log file path")

    # Environment
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")

    # Reception rule configuration
    RECEPTION_RULES_PATH: str | None = Field(
        None, description="YAML file with rule enablement and transition rules (bundled file when empty)"
    )

    # Reception business limits
    RECEPTION_MAX_DAILY_RECEPTIONS_PER_DOCTOR: int = Field(
        50, description="Maximum receptions a doctor can take on a single day"
    )
    RECEPTION_MAX_FUTURE_MONTHS: int = Field(3, description="Furthest a reception can be booked, in months")
    RECEPTION_MAX_PAST_DAYS: int = Field(30, description="Oldest accepted reception date, in days")
    RECEPTION_MAX_SERVICES: int = Field(10, description="Maximum services selectable in one reception")
    RECEPTION_MAX_NOTES_LENGTH: int = Field(1000, description="Maximum length of reception notes")
    RECEPTION_WORKING_HOURS_START: int = Field(8, description="First working hour (inclusive)")
    RECEPTION_WORKING_HOURS_END: int = Field(20, description="Last working hour (inclusive, on the hour)")
    RECEPTION_WEEKEND_DAYS: list[int] = Field([4, 5], description="Weekdays closed for receptions (Monday=0)")

    # Performance heuristics (warnings only)
    RECEPTION_PERFORMANCE_FUTURE_DAYS: int = Field(
        30, description="Warn when the reception date is further ahead than this many days"
    )
    RECEPTION_PERFORMANCE_PAST_DAYS: int = Field(
        1, description="Warn when the reception date is further back than this many days"
    )
    RECEPTION_PERFORMANCE_MAX_SERVICES: int = Field(5, description="Warn above this number of services")

    # Search validation heuristics
    RECEPTION_SEARCH_MAX_RANGE_DAYS: int = Field(365, description="Warn when a search spans more days")
    RECEPTION_SEARCH_MAX_PAGE_SIZE: int = Field(100, description="Warn when a search page is larger")

    # Cancellation
    RECEPTION_VALIDATION_TIMEOUT: float | None = Field(
        None, description="Deadline in seconds for one orchestration run (no deadline when empty)"
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return v

    @field_validator(
        "RECEPTION_MAX_DAILY_RECEPTIONS_PER_DOCTOR",
        "RECEPTION_MAX_SERVICES",
        "RECEPTION_MAX_NOTES_LENGTH",
        "RECEPTION_PERFORMANCE_MAX_SERVICES",
    )
    @classmethod
    def validate_positive_limit(cls, v):
        if v < 1:
            raise ValueError("Reception limits must be at least 1")
        return v

    @field_validator("RECEPTION_WEEKEND_DAYS")
    @classmethod
    def validate_weekend_days(cls, v):
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("RECEPTION_WEEKEND_DAYS entries must be between 0 (Monday) and 6 (Sunday)")
        return v

    @field_validator("RECEPTION_VALIDATION_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("RECEPTION_VALIDATION_TIMEOUT must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_working_hours(self):
        if not 0 <= self.RECEPTION_WORKING_HOURS_START < self.RECEPTION_WORKING_HOURS_END <= 24:
            raise ValueError("Working hours must satisfy 0 <= start < end <= 24")
        return self

    @computed_field
    @property
    def is_development(self) -> bool:
        """Whether the app runs in development mode"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached settings instance.
    Avoids re-reading the environment on every call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance (used by tests that patch the environment)."""
    global _settings_instance
    _settings_instance = None
