"""Settings for credential resolution."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CredentialSettings(BaseSettings):
    """Credential resolution settings, read from S3_CREDENTIALS_* variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="S3_CREDENTIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    access_key: Optional[str] = Field(default=None, description="Static access key")
    secret_key: Optional[str] = Field(default=None, description="Static secret key")
    session_token: Optional[str] = Field(default=None, description="Static session token")
    metadata_endpoint: str = Field(
        default="",
        description="Explicit metadata service endpoint. Empty uses the EC2/ECS defaults."
    )
    http_timeout: float = Field(default=5.0, gt=0, description="Metadata request timeout in seconds")

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key and self.secret_key)


def get_settings(**overrides) -> CredentialSettings:
    """Load settings from the environment, with keyword overrides."""
    return CredentialSettings(**overrides)
