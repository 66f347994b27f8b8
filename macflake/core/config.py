import logging
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from macflake.core.exceptions import ConfigurationError

DEFAULT_EPOCH = 1288834974657


class SnowflakeSettings(BaseSettings):
    """Generator settings read from ``SNOWFLAKE_*`` environment variables.

    Args:
        EPOCH (int): Custom epoch in milliseconds since the Unix origin.
        NODE_ID (Optional[int]): Node id override; derived from the host when unset.
        LOG_LEVEL (str): Level applied to the ``macflake`` logger.
    """

    EPOCH: int = Field(DEFAULT_EPOCH, ge=0)
    NODE_ID: Optional[int] = Field(None, ge=0, le=1023)
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SNOWFLAKE_", env_file=".env", extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_settings(**overrides) -> SnowflakeSettings:
    """Load settings from the environment, with keyword overrides taking precedence.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return SnowflakeSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid snowflake settings: {e}") from e
