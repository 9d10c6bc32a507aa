"""
TaskHero configuration management.

Loads configuration from environment variables or .env file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskHeroConfig(BaseSettings):
    """
    TaskHero configuration settings.

    Can be loaded from:
    1. Environment variables (TASKHERO_SUPABASE_URL, TASKHERO_SUPABASE_KEY, etc.)
    2. .env file in project root
    3. Direct instantiation with kwargs

    Example:
        ```python
        # From environment
        config = TaskHeroConfig()

        # Direct instantiation
        config = TaskHeroConfig(
            supabase_url="https://xxx.supabase.co",
            supabase_key="your-anon-key",
            site_url="https://tasks.example.com",
        )
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKHERO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase connection
    supabase_url: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)",
    )

    supabase_key: str = Field(
        ...,
        description="Supabase anon key; row-level security decides what each session may touch",
    )

    # Database schema
    db_schema: str = Field(
        default="public",
        description="PostgreSQL schema where the taskhero tables live",
        alias="schema",
    )

    # Public origin of the web app, used for invitation and reset links
    site_url: str = Field(
        default="http://localhost:8080",
        description="Origin that invitation and password-reset links point at",
    )

    # Edge function that delivers invitation emails
    invitation_function: str = Field(
        default="send-invitation",
        description="Name of the Supabase edge function that sends invitation emails",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level used by the CLI (DEBUG, INFO, WARNING, ...)",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Ensure Supabase URL is valid."""
        if not v.startswith("https://"):
            raise ValueError("supabase_url must start with https://")
        return v.rstrip("/")

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: str) -> str:
        """Ensure Supabase key is not empty."""
        if not v or len(v) < 10:
            raise ValueError("supabase_key appears invalid (too short)")
        return v

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v: str) -> str:
        """Links are built by appending paths, so keep the origin bare."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("site_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def login_url(self) -> str:
        return f"{self.site_url}/login"

    @property
    def reset_password_url(self) -> str:
        return f"{self.site_url}/reset-password"


def load_config(**kwargs) -> TaskHeroConfig:
    """
    Load TaskHero configuration.

    Priority order:
    1. Keyword arguments
    2. Environment variables (TASKHERO_*)
    3. .env file

    Args:
        **kwargs: Override configuration values

    Returns:
        TaskHeroConfig instance

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    return TaskHeroConfig(**kwargs)
