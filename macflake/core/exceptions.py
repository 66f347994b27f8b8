class SnowflakeError(Exception):
    """Base class for every error raised by macflake."""

    pass


class ConfigurationError(SnowflakeError):
    """Raised when a generator is constructed with invalid settings."""

    pass


class ClockRegressionError(SnowflakeError):
    """Raised when the clock reads earlier than the last issued timestamp.

    Args:
        last_timestamp (int): Elapsed milliseconds of the last issued ID.
        elapsed (int): Elapsed milliseconds observed on this call.
    """

    def __init__(self, last_timestamp: int, elapsed: int):
        self.last_timestamp = last_timestamp
        self.elapsed = elapsed
        super().__init__(
            "Clock moved backwards: elapsed time %d ms is before the last issued"
            " timestamp %d ms. Refusing to generate ID." % (elapsed, last_timestamp)
        )


class TimestampOverflowError(SnowflakeError):
    """Raised when the elapsed time no longer fits the 41-bit timestamp field."""

    pass


class NodeIdUnavailableError(SnowflakeError):
    """Raised when a node id cannot be derived from the host."""

    pass
