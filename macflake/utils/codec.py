"""
Snowflake ID codec.

Packs and unpacks the three fields of a 64-bit snowflake ID:

    |1 bit|         41 bits         |  10 bits |  12 bits  |
    |sign |        timestamp        | node_id  | sequence  |
    | 0   | milliseconds since epoch|  0-1023  |  0-4095   |

Both functions are pure; the epoch is passed in by the caller.
"""

from macflake.core.schema import DecodedSnowflake

TIMESTAMP_BITS = 41
NODE_ID_BITS = 10
SEQUENCE_BITS = 12

MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1
MAX_NODE_ID = (1 << NODE_ID_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
MAX_ID = (1 << 64) - 1

NODE_ID_SHIFT = SEQUENCE_BITS
TIMESTAMP_SHIFT = NODE_ID_BITS + SEQUENCE_BITS


def encode(elapsed: int, node_id: int, sequence: int) -> int:
    """Pack elapsed milliseconds, node id and sequence into a snowflake ID.

    Args:
        elapsed (int): Milliseconds since the generator epoch (0 to 2^41 - 1).
        node_id (int): Node id (0-1023).
        sequence (int): Sequence number (0-4095).

    Returns:
        int: The 64-bit snowflake ID.

    Raises:
        ValueError: If any field is outside its bit range.
    """
    if not 0 <= elapsed <= MAX_TIMESTAMP:
        raise ValueError(f"Elapsed time must be between 0 and {MAX_TIMESTAMP}")
    if not 0 <= node_id <= MAX_NODE_ID:
        raise ValueError(f"Node ID must be between 0 and {MAX_NODE_ID}")
    if not 0 <= sequence <= MAX_SEQUENCE:
        raise ValueError(f"Sequence must be between 0 and {MAX_SEQUENCE}")

    return (elapsed << TIMESTAMP_SHIFT) | (node_id << NODE_ID_SHIFT) | sequence


def decode(snowflake_id: int, epoch: int) -> DecodedSnowflake:
    """Unpack a snowflake ID into absolute timestamp, node id and sequence.

    Args:
        snowflake_id (int): A 64-bit unsigned snowflake ID.
        epoch (int): Epoch in milliseconds the ID was generated against.

    Returns:
        DecodedSnowflake: The recovered fields.

    Raises:
        ValueError: If the ID is negative or wider than 64 bits.
    """
    if not 0 <= snowflake_id <= MAX_ID:
        raise ValueError("Snowflake ID must be a 64-bit unsigned integer")

    return DecodedSnowflake(
        timestamp=((snowflake_id >> TIMESTAMP_SHIFT) & MAX_TIMESTAMP) + epoch,
        node_id=(snowflake_id >> NODE_ID_SHIFT) & MAX_NODE_ID,
        sequence=snowflake_id & MAX_SEQUENCE,
    )
