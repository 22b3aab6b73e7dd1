"""
KSUID factory.

One factory runs one generation strategy, picked when it is built:

- PLAIN: 16 random bytes of payload.
- MILLISECOND / MICROSECOND / NANOSECOND: the leading payload bits hold the
  sub-second part of the instant, the rest stays random.
- SUBSECOND: the finest of the three the host clock supports, detected once.
- MONOTONIC: within a second, each KSUID is the previous one plus one.
  Small backward clock moves (less than the drift tolerance) keep
  incrementing instead of going back in time.
"""

import threading
from enum import Enum

from core.errors import ConfigError, InvalidLengthError
from core.ksuid import PAYLOAD_BYTES, TIME_MASK, Ksuid, to_ksuid_time
from generation.entropy import secure_entropy
from generation.precision import Precision, detect_precision
from internal.logging import get_logger
from utils.timestamp import Instant, now_instant

CLOCK_DRIFT_TOLERANCE = 10  # seconds


class Strategy(Enum):
    PLAIN = "plain"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"
    SUBSECOND = "subsecond"
    MONOTONIC = "monotonic"


_PRECISION_STRATEGIES = {
    Precision.MILLISECOND: Strategy.MILLISECOND,
    Precision.MICROSECOND: Strategy.MICROSECOND,
    Precision.NANOSECOND: Strategy.NANOSECOND,
}


def _time_delta(current, last):
    """Signed difference of two wrapped 32-bit KSUID times."""
    delta = (current - last) & TIME_MASK
    return delta - (1 << 32) if delta >= (1 << 31) else delta


class KsuidFactory:
    def __init__(self, strategy=Strategy.PLAIN, entropy=None, clock=None, drift_tolerance=CLOCK_DRIFT_TOLERANCE):
        if isinstance(drift_tolerance, bool) or not isinstance(drift_tolerance, int):
            raise ConfigError(f"Drift tolerance must be whole seconds, got {drift_tolerance!r}", key="drift_tolerance")
        if drift_tolerance < 1:
            raise ConfigError(f"Drift tolerance must be >= 1, got {drift_tolerance}", key="drift_tolerance")

        self._entropy = entropy or secure_entropy()
        self._clock = clock or now_instant
        self.drift_tolerance = drift_tolerance

        if strategy == Strategy.SUBSECOND:
            strategy = _PRECISION_STRATEGIES[detect_precision(self._clock)]
        self.strategy = strategy

        # monotonic state
        self._lock = threading.Lock()
        self._last = None

        self._log().debug("factory ready", drift_tolerance=drift_tolerance)

    def _log(self):
        # resolved per record, follows StructuredLogger.configure
        return get_logger().bind(strategy=self.strategy.value)

    @classmethod
    def plain(cls, entropy=None, clock=None):
        return cls(Strategy.PLAIN, entropy, clock)

    @classmethod
    def subsecond(cls, entropy=None, clock=None):
        return cls(Strategy.SUBSECOND, entropy, clock)

    @classmethod
    def monotonic(cls, entropy=None, clock=None, drift_tolerance=CLOCK_DRIFT_TOLERANCE):
        return cls(Strategy.MONOTONIC, entropy, clock, drift_tolerance)

    def create(self, instant=None):
        """Create a KSUID for instant, or for the clock's current reading."""
        if instant is None:
            instant = self._clock()

        strategy = self.strategy
        if strategy == Strategy.PLAIN:
            return Ksuid.from_time_and_payload(instant.seconds, self._random_payload())
        elif strategy == Strategy.MILLISECOND:
            return Ksuid.from_time_and_payload(instant.seconds, self._millisecond_payload(instant.nanos))
        elif strategy == Strategy.MICROSECOND:
            return Ksuid.from_time_and_payload(instant.seconds, self._microsecond_payload(instant.nanos))
        elif strategy == Strategy.NANOSECOND:
            return Ksuid.from_time_and_payload(instant.seconds, self._nanosecond_payload(instant.nanos))
        elif strategy == Strategy.MONOTONIC:
            return self._monotonic(instant.seconds)
        raise ConfigError(f"Unsupported strategy: {strategy!r}", key="strategy")

    def create_at(self, seconds, nanos=0):
        return self.create(Instant(seconds, nanos))

    def _random_payload(self):
        payload = self._entropy(PAYLOAD_BYTES)
        if len(payload) != PAYLOAD_BYTES:
            raise InvalidLengthError(f"Entropy source returned {len(payload)} bytes",
                                     expected=PAYLOAD_BYTES, actual=len(payload))
        return bytearray(payload)

    def _millisecond_payload(self, nanos):
        payload = self._random_payload()
        subsecs = ((nanos // 1_000_000) << 6) | (payload[1] & 0x3F)
        payload[0:2] = subsecs.to_bytes(2, "big")
        return payload

    def _microsecond_payload(self, nanos):
        payload = self._random_payload()
        subsecs = ((nanos // 1_000) << 4) | (payload[2] & 0x0F)
        payload[0:3] = subsecs.to_bytes(3, "big")
        return payload

    def _nanosecond_payload(self, nanos):
        payload = self._random_payload()
        subsecs = (nanos << 2) | (payload[3] & 0x03)
        payload[0:4] = subsecs.to_bytes(4, "big")
        return payload

    def _monotonic(self, seconds):
        with self._lock:
            last = self._last

            if last is None:
                last = Ksuid.from_time_and_payload(seconds, self._random_payload())
            else:
                delta = _time_delta(to_ksuid_time(seconds), last.time)
                if -self.drift_tolerance < delta <= 0:
                    if delta < 0:
                        self._log().debug("clock moved backwards, keeping last time", delta=delta)
                    last = last.increment()
                else:
                    if delta < 0:
                        self._log().warn("clock jumped backwards beyond tolerance, resetting", delta=delta)
                    last = Ksuid.from_time_and_payload(seconds, self._random_payload())

            # Ksuid is immutable, so handing out the stored value is safe
            self._last = last
            return last
