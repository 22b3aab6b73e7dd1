"""Random byte sources for KSUID payloads.

Every source is a plain callable taking a byte count and returning that many
bytes. The secure source is the default; the fast one is an explicit opt-in.
"""

import os
import random

from core.errors import ConfigError

UINT64_BYTES = 8


def secure_entropy():
    """Cryptographically secure bytes from the OS."""
    return os.urandom


def fast_entropy(seed=None):
    """Non-cryptographic bytes from a private PRNG. Not for secrets."""
    rng = random.Random(seed)

    def next_bytes(n):
        return rng.getrandbits(n * 8).to_bytes(n, "big") if n else b""

    return next_bytes


def from_uint64(next_uint64):
    """Adapt a function returning random 64-bit ints into a byte source."""
    def next_bytes(n):
        chunks = []
        for _ in range(0, n, UINT64_BYTES):
            chunks.append((next_uint64() & 0xFFFFFFFFFFFFFFFF).to_bytes(UINT64_BYTES, "big"))
        return b"".join(chunks)[:n]

    return next_bytes


_SOURCES = {
    "secure": secure_entropy,
    "fast": fast_entropy,
}


def get_entropy(name):
    """Resolve a configured entropy name to a source."""
    try:
        factory = _SOURCES[name]
    except KeyError:
        raise ConfigError(f"Unknown entropy source: {name!r}", key="entropy") from None
    return factory()
