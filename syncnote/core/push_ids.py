"""Push Ids — chronologically ordered, collision-resistant store keys.

Invariants:
    - 20 characters: 8 timestamp chars + 12 random chars from PUSH_CHARS
    - Lexicographic order of ids follows generation order, including ids
      generated within the same millisecond (random tail is incremented)

Design Decisions:
    - Same alphabet and layout as Firebase push(): keys stay compatible with
      records written by other clients of the same database
    - Generator is an object, not module state, so each store owns its clock
"""

import secrets
import threading
import time

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    """Stateful generator; thread-safe."""

    def __init__(self, clock=None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last_ms = -1
        self._last_rand = [0] * 12
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            now = self._clock()
            duplicate = now == self._last_ms
            self._last_ms = now

            ts_chars = []
            for _ in range(8):
                ts_chars.append(PUSH_CHARS[now % 64])
                now //= 64
            ts = "".join(reversed(ts_chars))

            if not duplicate:
                self._last_rand = [secrets.randbelow(64) for _ in range(12)]
            else:
                i = 11
                while i >= 0 and self._last_rand[i] == 63:
                    self._last_rand[i] = 0
                    i -= 1
                if i >= 0:
                    self._last_rand[i] += 1

            return ts + "".join(PUSH_CHARS[r] for r in self._last_rand)
