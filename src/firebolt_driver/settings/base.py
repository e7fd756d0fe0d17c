from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class DriverBaseSettings(BaseSettings):
    """Base settings for the driver.

    Values come from environment variables (highest priority), then a
    ``.env`` file in the working directory, then defaults in code.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    @classmethod
    def get_env_prefix(cls) -> str:
        """Get the environment variable prefix for this settings class.

        Override in subclasses to namespace environment variables.

        Returns:
            str: Environment variable prefix (empty string for base class)
        """
        return ""

    def model_post_init(self, __context: Any) -> None:
        """Post initialization hook; subclasses call super() first."""
        super().model_post_init(__context)
