"""
Snowflake ID Generator Module

A Python implementation of Twitter's Snowflake algorithm for generating unique,
time-ordered 64-bit identifiers without coordination between nodes. The node
id is derived from the host's hardware address unless one is supplied.

Algorithm Overview:
    Each ID packs three fields (see macflake.utils.codec):

    - Timestamp: 41 bits = ~69 years of milliseconds from the custom epoch
    - Node ID: 10 bits = 1024 possible nodes (0-1023)
    - Sequence: 12 bits = 4096 IDs per millisecond per node

Generation:
    1. Read the clock and compute milliseconds elapsed since the epoch
    2. Reject the call if the clock moved behind the last issued timestamp
    3. Same millisecond: advance the sequence, or wait for the next
       millisecond once all 4096 values are used
    4. New millisecond: reset the sequence to 0
    5. Record the timestamp and pack the fields

Thread Safety:
    - generate() is serialized with threading.Lock()
    - agenerate() shares the same lock and yields to the event loop while
      waiting for the next millisecond, so one instance works across loops

Clock Considerations:
    - Clock regression raises ClockRegressionError and is never retried
    - The caller decides whether to retry or escalate

Based on: Twitter's Snowflake algorithm
"""

import asyncio
import threading
import time
from typing import Callable, Optional

from macflake.core.config import DEFAULT_EPOCH, SnowflakeSettings, load_settings
from macflake.core.exceptions import (
    ClockRegressionError,
    ConfigurationError,
    TimestampOverflowError,
)
from macflake.core.schema import DecodedSnowflake
from macflake.services.logger import get_logger, setup_logger
from macflake.services.node_identity import NodeIdSource, resolve_node_id
from macflake.utils import codec

logger = get_logger()


def current_millis() -> int:
    """Returns the current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class Snowflake:
    """A thread-safe Snowflake ID generator.

    Args:
        epoch: Custom epoch in milliseconds since the Unix origin.
        node_id_override: Node id to use instead of deriving one from the host.
            Must be unique across all running generators to avoid collisions.
        node_id_source: Source asked for a node id when no override is given.
            Defaults to the host's hardware address.
        clock: Callable returning the current time in milliseconds.

    Raises:
        ConfigurationError: If the epoch or the node id override is invalid.
    """

    def __init__(
        self,
        epoch: int = DEFAULT_EPOCH,
        node_id_override: Optional[int] = None,
        *,
        node_id_source: Optional[NodeIdSource] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        if isinstance(epoch, bool) or not isinstance(epoch, int) or epoch < 0:
            raise ConfigurationError(
                f"Epoch must be a non-negative integer of milliseconds, got {epoch!r}"
            )

        self._epoch = epoch
        self._node_id = resolve_node_id(node_id_override, node_id_source)
        self._clock = clock or current_millis
        self._sequence = 0
        self._last_timestamp = -1
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls, settings: Optional[SnowflakeSettings] = None, **kwargs
    ) -> "Snowflake":
        """Build a generator from SnowflakeSettings, loading them if not given.

        Also configures the process-wide ``macflake`` logger with
        settings.LOG_LEVEL, which affects every generator in the process.
        """
        settings = settings or load_settings()
        setup_logger(settings.LOG_LEVEL)
        return cls(settings.EPOCH, settings.NODE_ID, **kwargs)

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def node_id(self) -> int:
        return self._node_id

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def last_timestamp(self) -> int:
        return self._last_timestamp

    def get_node_id(self) -> int:
        """Returns the node id resolved at construction."""
        return self._node_id

    def _elapsed(self) -> int:
        return self._clock() - self._epoch

    def _check_clock(self, elapsed: int) -> None:
        if elapsed < self._last_timestamp or elapsed < 0:
            logger.error(
                "Clock moved backwards: elapsed %s ms, last issued %s ms",
                elapsed,
                self._last_timestamp,
            )
            raise ClockRegressionError(self._last_timestamp, elapsed)

        if elapsed > codec.MAX_TIMESTAMP:
            raise TimestampOverflowError(
                f"{elapsed} ms since epoch {self._epoch} does not fit in"
                f" {codec.TIMESTAMP_BITS} bits"
            )

    def _try_issue(self) -> Optional[int]:
        """Issue an ID for the current millisecond.

        Returns None when the sequence is exhausted for this millisecond.
        Must be called with self._lock held.
        """
        elapsed = self._elapsed()
        self._check_clock(elapsed)

        if elapsed == self._last_timestamp:
            if self._sequence == codec.MAX_SEQUENCE:
                return None
            self._sequence += 1
        else:
            self._sequence = 0

        self._last_timestamp = elapsed
        return codec.encode(elapsed, self._node_id, self._sequence)

    def _wait_for_next_millis(self) -> None:
        """Spins until the clock passes the last issued millisecond."""
        logger.debug("Sequence exhausted at %s ms, waiting", self._last_timestamp)
        while self._elapsed() <= self._last_timestamp:
            pass

    def generate(self) -> int:
        """Generates a new unique Snowflake ID.

        Returns:
            A 64-bit unique Snowflake ID.

        Raises:
            ClockRegressionError: If the system clock moved backwards.
            TimestampOverflowError: If the epoch is more than ~69 years ago.
        """
        with self._lock:
            while True:
                snowflake_id = self._try_issue()
                if snowflake_id is not None:
                    return snowflake_id
                self._wait_for_next_millis()

    async def agenerate(self) -> int:
        """Async variant of generate() that yields while waiting for the clock."""
        while True:
            with self._lock:
                snowflake_id = self._try_issue()
            if snowflake_id is not None:
                return snowflake_id
            await asyncio.sleep(0)

    def generate_batch(self, count: int) -> list[int]:
        """Generates count IDs in increasing order."""
        if count < 0:
            raise ValueError("count must not be negative")
        return [self.generate() for _ in range(count)]

    def decode(self, snowflake_id: int) -> DecodedSnowflake:
        """Decodes an ID against this generator's epoch.

        Returns:
            DecodedSnowflake with the absolute timestamp, node id and sequence.
        """
        return codec.decode(snowflake_id, self._epoch)

    def __repr__(self) -> str:
        return f"Snowflake(epoch={self._epoch}, node_id={self._node_id})"
