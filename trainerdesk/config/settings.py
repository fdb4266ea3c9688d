"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode keeps all data in memory for local development and tests.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.billing.cycles import CycleBounds
from ..core.clients.models import ClientDefaults
from ..core.dates import time_to_minutes
from ..core.errors import InvalidFormat
from ..core.scheduling.availability import WorkingWindow


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "TrainerDesk API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys accepted in the X-API-Key header."
    )

    # Snowflake Configuration
    snowflake_account: str = Field(
        default="",
        description="Snowflake account identifier"
    )
    snowflake_user: str = Field(
        default="",
        description="Snowflake service account username"
    )
    snowflake_password: str = Field(
        default="",
        description="Snowflake service account password"
    )
    snowflake_private_key_path: Optional[str] = Field(
        default=None,
        description="Path to RSA private key file for key-pair authentication"
    )
    snowflake_database: str = Field(
        default="TRAINERDESK",
        description="Snowflake database name"
    )
    snowflake_schema: str = Field(
        default="CLIENTS",
        description="Snowflake schema name"
    )
    snowflake_warehouse: str = Field(
        default="COMPUTE_WH",
        description="Snowflake warehouse for query execution"
    )
    snowflake_role: Optional[str] = Field(
        default=None,
        description="Snowflake role to use (optional)"
    )
    snowflake_mock_mode: bool = Field(
        default=False,
        description="Keep all data in an in-memory repository instead of Snowflake."
    )

    # Scheduling
    working_day_start: str = Field(
        default="06:00",
        description="Start of the daily working window (HH:MM) used for free slots"
    )
    working_day_end: str = Field(
        default="22:00",
        description="End of the daily working window (HH:MM) used for free slots"
    )
    min_free_slot_minutes: int = Field(
        default=30,
        ge=0,
        description="Free gaps shorter than this are not reported"
    )

    # Billing
    billing_min_year: int = Field(
        default=1900,
        description="Earliest year a resolved billing cycle may fall in"
    )
    billing_max_year: int = Field(
        default=2100,
        description="Latest year a resolved billing cycle may fall in"
    )

    # Client defaults
    client_default_is_active: bool = Field(
        default=True,
        description="is_active value for clients created without one"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("working_day_start", "working_day_end")
    @classmethod
    def _validate_time_of_day(cls, value: str) -> str:
        try:
            time_to_minutes(value)
        except InvalidFormat as e:
            raise ValueError(str(e)) from e
        return value

    @model_validator(mode="after")
    def _validate_working_window(self) -> "Settings":
        # Each bound is checked alone above; the window needs end after start
        try:
            self.working_window
        except InvalidFormat as e:
            raise ValueError(str(e)) from e
        return self

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def working_window(self) -> WorkingWindow:
        return WorkingWindow(
            start=self.working_day_start,
            end=self.working_day_end,
            min_slot_minutes=self.min_free_slot_minutes,
        )

    @property
    def cycle_bounds(self) -> CycleBounds:
        return CycleBounds(min_year=self.billing_min_year, max_year=self.billing_max_year)

    @property
    def client_defaults(self) -> ClientDefaults:
        return ClientDefaults(is_active=self.client_default_is_active)

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on whether we're in mock mode.
        """
        missing = []

        if not self.snowflake_mock_mode:
            if not self.snowflake_account:
                missing.append("SNOWFLAKE_ACCOUNT")
            if not self.snowflake_user:
                missing.append("SNOWFLAKE_USER")
            if not self.snowflake_password and not self.snowflake_private_key_path:
                missing.append("SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
