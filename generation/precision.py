"""Detect the sub-second resolution the host clock really offers.

A clock may report nanoseconds while only ticking every millisecond, so a
few readings are classified and the finest one wins.
"""

import time
from enum import IntEnum

from internal.logging import get_logger
from utils.timestamp import now_instant


class Precision(IntEnum):
    MILLISECOND = 1
    MICROSECOND = 2
    NANOSECOND = 3


def classify(nanos):
    if nanos % 1_000 != 0:
        return Precision.NANOSECOND
    if nanos % 1_000_000 != 0:
        return Precision.MICROSECOND
    return Precision.MILLISECOND


def detect_precision(clock=None, samples=3, sleep=None):
    """Best precision seen over a few clock readings. Millisecond is the floor."""
    clock = clock or now_instant
    sleep = sleep or time.sleep

    best = Precision.MILLISECOND
    for i in range(samples):
        if i > 0:
            # avoid reading the same tick twice
            sleep(1e-9)
        best = max(best, classify(clock().nanos))

    get_logger().debug("clock precision detected", precision=best.name, samples=samples)
    return best
