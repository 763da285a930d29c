"""Engine configuration management using Pydantic Settings."""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")

    # Logging Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Settlement program assumptions
    settlement_percent: float = Field(default=50.0, alias="SETTLEMENT_PERCENT")
    program_fee_percent: float = Field(default=25.0, alias="PROGRAM_FEE_PERCENT")

    # Amortization loop guard
    max_simulation_months: int = Field(default=360, alias="MAX_SIMULATION_MONTHS")

    # Only used when a caller explicitly asks for an estimated income
    default_monthly_income: Optional[float] = Field(
        default=None, alias="DEFAULT_MONTHLY_INCOME"
    )

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v):
        """Validate application environment."""
        allowed_envs = {"development", "testing", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("settlement_percent")
    @classmethod
    def validate_settlement_percent(cls, v):
        """Settlement must be a positive share of the balance."""
        if not 0 < v <= 100:
            raise ValueError("SETTLEMENT_PERCENT must be in (0, 100]")
        return v

    @field_validator("program_fee_percent")
    @classmethod
    def validate_program_fee_percent(cls, v):
        """Validate program fee percentage."""
        if not 0 <= v <= 100:
            raise ValueError("PROGRAM_FEE_PERCENT must be in [0, 100]")
        return v

    @field_validator("max_simulation_months")
    @classmethod
    def validate_max_simulation_months(cls, v):
        """The loop cap may be lowered but never raised past 30 years."""
        if not 1 <= v <= 360:
            raise ValueError("MAX_SIMULATION_MONTHS must be between 1 and 360")
        return v

    @field_validator("default_monthly_income")
    @classmethod
    def validate_default_monthly_income(cls, v):
        """Validate the opt-in income estimate."""
        if v is not None and v <= 0:
            raise ValueError("DEFAULT_MONTHLY_INCOME must be positive when set")
        return v


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Get engine settings instance."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Global settings instance - will be created on first use
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Reset global settings instance (useful for testing)."""
    global _settings
    _settings = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from settings.

    Args:
        level: Explicit level name; defaults to the LOG_LEVEL setting
    """
    if level is None:
        level = get_global_settings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
