"""
Authentication configuration settings.

Bearer token verification parameters. Tokens are issued by the identity
provider; this service only verifies them.

Dependencies: pydantic_settings
System role: JWT verification configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """JWT verification settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JWT_",
        case_sensitive=False,
        extra="ignore",
    )

    secret: str = Field(default="change-me-to-a-long-random-secret-value", description="Shared secret for HS* tokens")
    algorithm: str = Field(default="HS256", description="Token signing algorithm")
