"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ROUTETREE_ prefix (e.g., ROUTETREE_BASE_PATH=app).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ROUTETREE_ prefix.

    Examples:
        ROUTETREE_DELIMITER=/
        ROUTETREE_BASE_PATH=app
        ROUTETREE_DEFAULT_HOST=www.example.com
    """

    model_config = SettingsConfigDict(
        env_prefix="ROUTETREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Pattern configuration
    delimiter: str = Field(
        default="/",
        description="Path delimiter; a variable without explicit regex captures [^<delimiter>]+",
    )

    # Link configuration
    base_path: str = Field(
        default="",
        description="Base path prepended to generated links and stripped from matched locations",
    )

    default_scheme: str = Field(
        default="http",
        description="Scheme used for absolute links when none is given",
    )

    default_host: str = Field(
        default="localhost",
        description="Host used for absolute links when none is given",
    )

    index_file: str = Field(
        default="index.html",
        description="Trailing file name stripped from locations before matching",
    )

    # Output configuration
    highlight_patterns: bool = Field(
        default=True,
        description="Highlight route patterns when listing a route table",
    )

    debug_mode: bool = Field(
        default=False,
        description="Raise command-line verbosity to trace level (match and generation details)",
    )

    @field_validator("delimiter")
    @classmethod
    def delimiter_check(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiter must be a single character")
        return value

    def basePath_normalize(self, base_path: str | None = None) -> str:
        """
        Normalize a base path to a leading-slash, no-trailing-slash form.

        Args:
            base_path: Base path to normalize, defaults to the configured one

        Returns:
            Normalized base path, or an empty string for no base path

        Example:
            >>> settings = AppSettings()
            >>> settings.basePath_normalize('app/')
            '/app'
            >>> settings.basePath_normalize('')
            ''
        """
        if base_path is None:
            base_path = self.base_path
        base_path = base_path.strip("/")
        return f"/{base_path}" if base_path else ""


# Singleton instance - import this in your code
appsettings = AppSettings()
