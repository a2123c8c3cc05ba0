"""
strapi-schema Settings and Configuration.

Pydantic settings with environment variable support:
- Nested settings with env_prefix for organization
- Environment variables use double underscore delimiter (ENV__NESTED__VAR)
- Global settings singleton

Example .env file:
    # Strapi API
    STRAPI__URL=http://localhost:1337/api
    STRAPI__API_TOKEN=...
    STRAPI__IDENTIFIER=editor@example.com
    STRAPI__PASSWORD=...
    STRAPI__PAGE_SIZE=100
    STRAPI__TIMEOUT=30

    # Release tooling
    RELEASE__MAIN_BRANCH=main
    RELEASE__REMOTE=origin
    RELEASE__RESOLVE_FILE=resolve.json
    RELEASE__PYPROJECT_PATH=pyproject.toml

    # Logging
    LOG_LEVEL=INFO
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StrapiSettings(BaseSettings):
    """
    Strapi API connection settings.

    Either an API token or an identifier/password pair may be configured.
    When both are present the token wins and no login request is made.

    Environment variables:
        STRAPI__URL - API endpoint including the base path (e.g. http://localhost:1337/api)
        STRAPI__API_TOKEN - Bearer token (API token or JWT)
        STRAPI__IDENTIFIER - Login identifier (email or username) for /auth/local
        STRAPI__PASSWORD - Login password for /auth/local
        STRAPI__PAGE_SIZE - Page size used by collection fetches
        STRAPI__TIMEOUT - HTTP timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="STRAPI__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:1337/api",
        description="API endpoint including the base path",
    )

    api_token: str | None = Field(
        default=None,
        description="Bearer token sent on every request",
    )

    identifier: str | None = Field(
        default=None,
        description="Login identifier for token acquisition",
    )

    password: str | None = Field(
        default=None,
        description="Login password for token acquisition",
    )

    page_size: int = Field(
        default=100,
        ge=1,
        description="Page size for collection fetches (Strapi caps this server side)",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds, enforced by the transport",
    )


class ReleaseSettings(BaseSettings):
    """
    Repository maintenance settings used by `strapi-schema repo ...`.

    Environment variables:
        RELEASE__MAIN_BRANCH - Branch releases and merges target
        RELEASE__REMOTE - Git remote name
        RELEASE__RESOLVE_FILE - JSON file mapping local dependencies to published versions
        RELEASE__PYPROJECT_PATH - Project file whose version is bumped
    """

    model_config = SettingsConfigDict(
        env_prefix="RELEASE__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    main_branch: str = Field(
        default="main",
        description="Branch that receives squash merges and publishes",
    )

    remote: str = Field(
        default="origin",
        description="Git remote used for pushes and branch lookups",
    )

    resolve_file: str = Field(
        default="resolve.json",
        description="Local dependency overrides applied while publishing",
    )

    pyproject_path: str = Field(
        default="pyproject.toml",
        description="Path of the project file to bump",
    )


class Settings(BaseSettings):
    """
    Global settings.

    Aggregates all nested settings groups with environment variable support.
    Uses double underscore delimiter for nested variables (STRAPI__URL).

    Environment variables:
        LOG_LEVEL - Default loguru level for the CLI
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # Nested settings groups
    strapi: StrapiSettings = Field(default_factory=StrapiSettings)
    release: ReleaseSettings = Field(default_factory=ReleaseSettings)


# Global settings singleton
settings = Settings()
