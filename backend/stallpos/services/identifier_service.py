# Overview: Service-layer id allocation for catalog items, sales and payouts.

from __future__ import annotations

import time
from typing import Callable, Iterable


class IdGenerator:
    """
    Allocates unique string ids of the form ``<prefix>-<millis>-<seq>``.

    The millisecond component keeps ids ordered across restarts; the
    sequence increases whenever two allocations land in the same
    millisecond (including every id of a bulk batch), so ids never repeat
    within a process even when the clock stalls or steps backwards.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last_ms = 0
        self._seq = 0

    def _tick(self) -> tuple[int, int]:
        now_ms = int(self._clock() * 1000)
        if now_ms > self._last_ms:
            self._last_ms = now_ms
            self._seq = 0
        else:
            # Same (or earlier) millisecond: stay on the last one and bump the sequence
            self._seq += 1
        return self._last_ms, self._seq

    def next_id(self, prefix: str) -> str:
        ms, seq = self._tick()
        return f"{prefix}-{ms}-{seq}"

    def next_ids(self, prefix: str, count: int) -> list[str]:
        """Allocate ``count`` ids for one batch; all share one call's clock read."""
        if count <= 0:
            return []
        ms, seq = self._tick()
        ids = [f"{prefix}-{ms}-{seq + offset}" for offset in range(count)]
        self._seq = seq + count - 1
        return ids

    def observe(self, existing_ids: Iterable[str]) -> None:
        """
        Move past ids already handed out, e.g. ones loaded from storage.

        Ids not in ``<prefix>-<millis>-<seq>`` form (such as seeded
        "zz-1") are ignored.
        """
        for value in existing_ids:
            parts = str(value).rsplit("-", 2)
            if len(parts) != 3 or not parts[1].isdigit() or not parts[2].isdigit():
                continue
            ms, seq = int(parts[1]), int(parts[2])
            if (ms, seq) > (self._last_ms, self._seq):
                self._last_ms, self._seq = ms, seq
