from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class DecodedSnowflake(BaseModel):
    """Fields recovered from a snowflake ID.

    Args:
        timestamp (int): Absolute creation time in milliseconds since the Unix origin.
        node_id (int): Node id of the generator that issued the ID.
        sequence (int): Per-millisecond sequence number.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(
        ...,
        description="Creation time in milliseconds since the Unix origin",
        examples=[1739194479256],
    )
    node_id: int = Field(
        ...,
        ge=0,
        le=1023,
        description="Node id of the issuing generator",
        examples=[360],
    )
    sequence: int = Field(
        ...,
        ge=0,
        le=4095,
        description="Sequence number within the millisecond",
        examples=[322],
    )

    @property
    def created_at(self) -> datetime:
        """Creation time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)
