"""
Environment-aware configuration settings for the compliance engine.

Supports dev, test, and prod environments with appropriate defaults.
"""

import logging
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported deployment environments."""

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class WorkflowSettings(BaseSettings):
    """
    Default options for workflow engines.

    Options passed to an individual engine are merged over these.
    """

    model_config = SettingsConfigDict(env_prefix="WORKFLOW_")

    max_auto_transitions: int = Field(
        default=10,
        ge=1,
        description="Hard cap on cascaded auto-transitions per evaluation",
    )
    auto_evaluate: bool = Field(
        default=True,
        description="Run the auto-transition cascade after a manual transition",
    )
    debug: bool = Field(default=False, description="Log every executed transition")


class SchedulerSettings(BaseSettings):
    """Cron schedule calculator settings."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    max_search_minutes: int = Field(
        default=525600,
        ge=1,
        description="Candidate minutes tried before giving up (one non-leap year)",
    )
    default_schedule: str = Field(
        default="0 0 * * *",
        description="Schedule used for report types without a default",
    )


class ComplianceSettings(BaseSettings):
    """Compliance evaluator settings."""

    model_config = SettingsConfigDict(env_prefix="COMPLIANCE_")

    catalog_path: Optional[str] = Field(
        default=None,
        description="Path to the regulatory catalog JSON file",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False,  # LOG_LEVEL and log_level both work
        extra="ignore",        # Ignore unknown environment variables
    )

    # Application
    app_name: str = Field(default="Space Compliance Engine")
    environment: Environment = Field(default=Environment.DEV)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Sub-settings
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    compliance: ComplianceSettings = Field(default_factory=ComplianceSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str | Environment) -> Environment:
        """Validate and convert environment string to enum."""
        if isinstance(v, Environment):
            return v
        return Environment(v.lower())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEV

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TEST

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PROD


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
