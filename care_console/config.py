"""Configuration management for the customer care console."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from care_console.models.system import SystemSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote data store
    api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the REST data store",
    )
    api_token: str | None = Field(default=None, description="Bearer token for the data store")
    request_timeout: float = Field(default=15.0, description="Request timeout in seconds")

    # API Configuration
    api_port: int = Field(default=8000, description="API server port")
    api_host: str = Field(default="0.0.0.0", description="API server host")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Loyalty
    point_value: Decimal = Field(
        default=Decimal("1"), gt=0, description="Currency value of a single point"
    )
    currency: str = Field(default="EGP", description="Currency label shown on vouchers")
    voucher_date_format: str = Field(
        default="%Y-%m-%d", description="strftime format for voucher dates"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    def system_settings(self) -> SystemSettings:
        """Business settings handed to the loyalty core on every call."""
        return SystemSettings(point_value=self.point_value, currency=self.currency)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
