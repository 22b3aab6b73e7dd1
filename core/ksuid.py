"""
KSUID - K-Sortable Unique Identifier.

Time-sortable, globally unique IDs without coordination.
Format: 4 bytes timestamp + 16 bytes payload = 27 char base62 string.
Instances are immutable.
"""

from datetime import datetime, timezone

from core import base62
from core.errors import InvalidLengthError, InvalidOverflowError
from utils.timestamp import format_timestamp

# KSUID epoch: 2014-05-13T16:53:20Z
EPOCH_OFFSET = 1_400_000_000

KSUID_BYTES = 20
TIME_BYTES = 4
PAYLOAD_BYTES = 16
KSUID_CHARS = base62.KSUID_CHARS

TIME_MASK = 0xFFFFFFFF
PAYLOAD_MASK = (1 << (PAYLOAD_BYTES * 8)) - 1

MIN_STRING = "000000000000000000000000000"
MAX_STRING = "aWgEPTl1tmebfsQzFP4bxwgy80V"


def to_ksuid_time(unix_time):
    """Unix seconds to unsigned 32-bit KSUID seconds (wraps around)."""
    return (unix_time - EPOCH_OFFSET) & TIME_MASK


def to_unix_time(ksuid_time):
    return (ksuid_time & TIME_MASK) + EPOCH_OFFSET


def _as_bytes(data, expected, what):
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidLengthError(f"Invalid {what}: expected {expected} bytes, got {type(data).__name__}",
                                 expected=expected)
    data = bytes(data)
    if len(data) != expected:
        raise InvalidLengthError(f"Invalid {what} length: {len(data)}", expected=expected, actual=len(data))
    return data


class Ksuid:
    __slots__ = ("_time", "_payload")

    def __init__(self, time, payload):
        """Raw constructor: 32-bit KSUID time and a 16 byte payload, copied."""
        self._time = time & TIME_MASK
        self._payload = _as_bytes(payload, PAYLOAD_BYTES, "payload")

    @classmethod
    def from_bytes(cls, data):
        """Build a KSUID from its 20 byte binary form."""
        data = _as_bytes(data, KSUID_BYTES, "KSUID")
        return cls(int.from_bytes(data[:TIME_BYTES], "big"), data[TIME_BYTES:])

    @classmethod
    def from_string(cls, string):
        """Build a KSUID from its 27 char canonical string."""
        return cls.from_words(base62.decode(string))

    @classmethod
    def from_time_and_payload(cls, unix_time, payload):
        """Build a KSUID from unix seconds and a 16 byte payload.

        Times outside the 32-bit window wrap around rather than fail.
        """
        return cls(to_ksuid_time(unix_time), payload)

    @classmethod
    def from_words(cls, words):
        if len(words) != base62.KSUID_WORDS:
            raise InvalidLengthError(f"Invalid word array length: {len(words)}",
                                     expected=base62.KSUID_WORDS, actual=len(words))
        payload = b"".join((word & base62.WORD_MASK).to_bytes(4, "big") for word in words[1:])
        return cls(words[0], payload)

    @staticmethod
    def is_valid(string):
        return base62.is_valid(string)

    @staticmethod
    def unix_time_of(string):
        return Ksuid.from_string(string).unix_time

    @staticmethod
    def payload_of(string):
        return Ksuid.from_string(string).payload

    @staticmethod
    def instant_of(string):
        return Ksuid.from_string(string).instant

    @property
    def time(self):
        """Raw KSUID seconds since EPOCH_OFFSET."""
        return self._time

    @property
    def unix_time(self):
        return to_unix_time(self._time)

    @property
    def instant(self):
        return datetime.fromtimestamp(self.unix_time, tz=timezone.utc)

    @property
    def payload(self):
        return bytes(self._payload)

    def to_bytes(self):
        return self._time.to_bytes(TIME_BYTES, "big") + self._payload

    def to_words(self):
        words = [self._time]
        for i in range(0, PAYLOAD_BYTES, 4):
            words.append(int.from_bytes(self._payload[i:i + 4], "big"))
        return words

    def to_string(self):
        return base62.encode(self.to_words())

    def to_dict(self):
        """Component breakdown, same fields as segment.io's `ksuid -f inspect`."""
        return {
            "string": self.to_string(),
            "raw": self.to_bytes().hex().upper(),
            "time": format_timestamp(self.unix_time * 1_000_000),
            "timestamp": self._time,
            "unix_time": self.unix_time,
            "payload": self._payload.hex().upper(),
        }

    def increment(self):
        """Next KSUID: payload + 1, carrying into time on payload overflow."""
        payload = int.from_bytes(self._payload, "big") + 1
        time = self._time

        if payload > PAYLOAD_MASK:
            payload = 0
            time += 1
            if time > TIME_MASK:
                raise InvalidOverflowError("Cannot increment the maximum KSUID", value=self.to_string())

        return Ksuid(time, payload.to_bytes(PAYLOAD_BYTES, "big"))

    def compare(self, other):
        """Unsigned comparison of time, then payload. Returns -1, 0 or 1."""
        if self._time != other._time:
            return 1 if self._time > other._time else -1
        # bytes compare lexicographically as unsigned values
        if self._payload != other._payload:
            return 1 if self._payload > other._payload else -1
        return 0

    def __eq__(self, other):
        if not isinstance(other, Ksuid):
            return NotImplemented
        return self._time == other._time and self._payload == other._payload

    def __hash__(self):
        return hash((self._time, self._payload))

    def __lt__(self, other):
        if not isinstance(other, Ksuid):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other):
        if not isinstance(other, Ksuid):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, Ksuid):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other):
        if not isinstance(other, Ksuid):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"Ksuid('{self.to_string()}')"
