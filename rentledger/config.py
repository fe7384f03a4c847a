"""Application configuration from environment variables."""

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./rentledger.db",
        description="SQLAlchemy connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Log file path")

    # Ledger
    backfill_months: int = Field(
        default=12,
        ge=0,
        description="How many months before as_of ensure_periods may reach back",
    )
    postpaid_offset_months: int = Field(
        default=1,
        ge=0,
        description="Months between a postpaid service month and its billing month",
    )
    allocation_max_retries: int = Field(
        default=3,
        ge=0,
        description="Re-reads allowed after a concurrent balance change",
    )

    # Reporting
    unknown_placeholder: str = Field(
        default="Unknown",
        description="Display value used when a tenant or property lookup fails",
    )

    # API
    api_title: str = Field(default="Rent Ledger API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


# Global settings instance
settings = Settings()
