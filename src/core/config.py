"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP transport) read the same config consistently.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "graphql-schema-dl"
APP_VERSION = "1.0.0"

DEFAULT_AUTH_ENV_PREFIX = "GRAPHQL_HEADER_"
TIMEOUT_ENV_VAR = "GRAPHQL_SCHEMA_DL_HTTP_TIMEOUT_SECONDS"


class AppSettings(BaseSettings):
    """Central application settings.

    Header values never live here: they come from flags, the
    `GRAPHQL_HEADER_*` variables and the auth file (see `header_resolver`).
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_SCHEMA_DL_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the introspection request (seconds).",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects followed per attempt.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/{APP_VERSION}",
        min_length=1,
        description="Default User-Agent; a resolved header of the same name wins.",
    )
    auth_env_prefix: str = Field(
        default=DEFAULT_AUTH_ENV_PREFIX,
        min_length=1,
        description="Default prefix of environment variables turned into headers.",
    )
