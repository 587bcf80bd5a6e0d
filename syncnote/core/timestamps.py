"""Timestamps — epoch milliseconds, the unit every stored document uses."""

import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)
