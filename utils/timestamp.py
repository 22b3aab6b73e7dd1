"""Clock readings and timestamp formatting."""

import time
from datetime import datetime, timezone

NANOS_PER_SECOND = 1_000_000_000


class Instant:
    """A point in time as unix seconds plus nanoseconds of that second."""

    __slots__ = ("seconds", "nanos")

    def __init__(self, seconds, nanos=0):
        if not 0 <= nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos out of range: {nanos}")
        self.seconds = seconds
        self.nanos = nanos

    @classmethod
    def from_nanos(cls, total):
        seconds, nanos = divmod(total, NANOS_PER_SECOND)
        return cls(seconds, nanos)

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.seconds == other.seconds and self.nanos == other.nanos

    def __hash__(self):
        return hash((self.seconds, self.nanos))

    def __repr__(self):
        return f"Instant(seconds={self.seconds}, nanos={self.nanos})"


def now_instant():
    """Current host time as an Instant."""
    return Instant.from_nanos(time.time_ns())


def now_micros():
    """Current time in microseconds since Unix epoch."""
    return time.time_ns() // 1_000


def format_timestamp(epoch_us=None):
    """Format timestamp as ISO 8601 with microseconds."""
    if epoch_us is None:
        epoch_us = now_micros()

    dt = datetime.fromtimestamp(epoch_us / 1_000_000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"
