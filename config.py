"""Application configuration."""
from functools import lru_cache
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants import API_TIMEOUT_DEFAULT
from exceptions import ConfigError


class TMSCredentials(BaseModel):
    """Credentials for the TMS API, read once at startup."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    client_id: str
    client_secret: str
    username: str
    password: str
    scope: str
    auth_type: str
    api_key: str

    def __repr__(self) -> str:
        return f"<TMSCredentials(base_url='{self.base_url}', username='{self.username}')>"

    __str__ = __repr__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000"]

    # TMS
    tms_base_url: str = ""
    tms_oauth_client_id: str = ""
    tms_oauth_client_secret: str = ""
    tms_oauth_username: str = ""
    tms_oauth_password: str = ""
    tms_oauth_scope: str = ""
    tms_oauth_type: str = "business"
    tms_api_key: str = ""
    tms_request_timeout: float = float(API_TIMEOUT_DEFAULT)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.app_env == "development"

    def validate_required_settings(self) -> list[str]:
        """
        Validate that all required settings are configured.

        Returns:
            List of missing or invalid settings
        """
        errors = []

        required = {
            "TMS_BASE_URL": self.tms_base_url,
            "TMS_OAUTH_CLIENT_ID": self.tms_oauth_client_id,
            "TMS_OAUTH_CLIENT_SECRET": self.tms_oauth_client_secret,
            "TMS_OAUTH_USERNAME": self.tms_oauth_username,
            "TMS_OAUTH_PASSWORD": self.tms_oauth_password,
            "TMS_OAUTH_SCOPE": self.tms_oauth_scope,
            "TMS_API_KEY": self.tms_api_key,
        }
        for name, value in required.items():
            if not value or not value.strip():
                errors.append(f"{name} is required")

        if self.tms_base_url and not self.tms_base_url.startswith(("http://", "https://")):
            errors.append("TMS_BASE_URL must start with http:// or https://")

        if self.tms_request_timeout <= 0:
            errors.append("TMS_REQUEST_TIMEOUT must be positive")

        return errors

    def tms_credentials(self) -> TMSCredentials:
        """
        Build the immutable TMS credentials.

        Returns:
            TMSCredentials

        Raises:
            ConfigError: If any required credential is missing
        """
        errors = self.validate_required_settings()
        if errors:
            raise ConfigError("Invalid TMS configuration: " + "; ".join(errors))

        return TMSCredentials(
            base_url=self.tms_base_url.rstrip("/"),
            client_id=self.tms_oauth_client_id,
            client_secret=self.tms_oauth_client_secret,
            username=self.tms_oauth_username,
            password=self.tms_oauth_password,
            scope=self.tms_oauth_scope,
            auth_type=self.tms_oauth_type,
            api_key=self.tms_api_key,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
