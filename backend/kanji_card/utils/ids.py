"""
Time-Ordered Identifiers

Every set, card and story is keyed by a ULID string. The "current" intake
set is found by taking the lexicographically largest id, so ids must sort
in creation order. Plain ULIDs only guarantee that at millisecond
resolution; within one millisecond their random tail decides the order.
The generator below issues strictly increasing values within the process
by bumping the previous ULID when the clock hasn't moved past it.

Usage:
    from kanji_card.utils.ids import new_id

    set_id = new_id()  # "01J9Z3Q6X8..."
"""

import threading
from typing import Optional

from ulid import ULID


class MonotonicIdGenerator:
    """Issues strictly increasing ULID strings."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last: Optional[ULID] = None

    def __call__(self) -> str:
        with self._lock:
            candidate = ULID()
            if self._last is not None and int(candidate) <= int(self._last):
                candidate = ULID.from_int(int(self._last) + 1)
            self._last = candidate
            return str(candidate)


_generator = MonotonicIdGenerator()


def new_id() -> str:
    """Return a fresh id that sorts after every id issued before it."""
    return _generator()
