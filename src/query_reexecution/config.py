"""
Configuration settings for the Query Re-Execution Orchestrator.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches to JSON logs

    # === Re-Execution ===
    REEXEC_ENABLED: bool = True
    # Ordered list of active plugins, evaluated in registration order
    REEXEC_STRATEGIES: list[str] = ["overlay", "reoptimize", "reexecute_lost_am", "dagsubmit"]
    REEXEC_MAX_ATTEMPTS: int = 2  # Total execution attempts, first one included

    # === Plan Adjustments ===
    REEXEC_OVERLAY: dict[str, str] = {}  # Applied by the overlay plugin on re-execution
    REOPTIMIZE_OVERLAY: dict[str, str] = {"runtime_stats.enabled": "true"}

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
