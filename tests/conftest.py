import logging
import socket
from types import SimpleNamespace

import psutil
import pytest

TEST_EPOCH = 1609459200000  # jan 1, 2021 00:00:00 utc


class FakeClock:
    """Returns the given readings in order, then keeps returning the last one."""

    def __init__(self, *readings):
        self.readings = list(readings)
        self.reads = 0

    def __call__(self):
        reading = self.readings[min(self.reads, len(self.readings) - 1)]
        self.reads += 1
        return reading


class TickingClock:
    """Advances by one millisecond every reads_per_tick reads."""

    def __init__(self, start, reads_per_tick):
        self.start = start
        self.reads_per_tick = reads_per_tick
        self.reads = 0

    def __call__(self):
        reading = self.start + self.reads // self.reads_per_tick
        self.reads += 1
        return reading


def link(address):
    return SimpleNamespace(family=psutil.AF_LINK, address=address)


def inet(address):
    return SimpleNamespace(family=socket.AF_INET, address=address)


@pytest.fixture(autouse=True)
def restore_macflake_logger():
    app_logger = logging.getLogger("macflake")
    handlers = list(app_logger.handlers)
    level = app_logger.level
    propagate = app_logger.propagate

    yield app_logger

    app_logger.handlers[:] = handlers
    app_logger.setLevel(level)
    app_logger.propagate = propagate
