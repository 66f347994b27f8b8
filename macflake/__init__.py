"""Snowflake IDs with node ids derived from the host's hardware address."""

from macflake.core.config import DEFAULT_EPOCH, SnowflakeSettings, load_settings
from macflake.core.exceptions import (
    ClockRegressionError,
    ConfigurationError,
    NodeIdUnavailableError,
    SnowflakeError,
    TimestampOverflowError,
)
from macflake.core.schema import DecodedSnowflake
from macflake.services.node_identity import (
    MacAddressNodeIdSource,
    NodeIdSource,
    OverrideNodeIdSource,
    RandomNodeIdSource,
    resolve_node_id,
)
from macflake.utils.codec import decode, encode
from macflake.utils.snowflake import Snowflake

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_EPOCH",
    "ClockRegressionError",
    "ConfigurationError",
    "DecodedSnowflake",
    "MacAddressNodeIdSource",
    "NodeIdSource",
    "NodeIdUnavailableError",
    "OverrideNodeIdSource",
    "RandomNodeIdSource",
    "Snowflake",
    "SnowflakeError",
    "SnowflakeSettings",
    "TimestampOverflowError",
    "decode",
    "encode",
    "load_settings",
    "resolve_node_id",
]
