# pathviz/core/pacing.py
#!/usr/bin/env python3
"""
Step pacing for animated searches.

The delay only spaces events out in real time; it never changes which events
a search produces or their order.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import time

from pathviz.core.types import PathCell, Visited

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 100
MIN_DELAY_MS = 50
DELAY_STEP_MS = 50


@dataclass
class Pacer:
    delay_ms: int = DEFAULT_DELAY_MS
    floor_ms: int = MIN_DELAY_MS
    step_ms: int = DELAY_STEP_MS
    _last_t: Optional[float] = None

    def __post_init__(self):
        self.delay_ms = self._clamp(self.delay_ms)

    def _clamp(self, ms) -> int:
        return max(self.floor_ms, int(ms))

    def set(self, ms) -> int:
        self.delay_ms = self._clamp(ms)
        return self.delay_ms

    def faster(self) -> int:
        return self.set(self.delay_ms - self.step_ms)

    def slower(self) -> int:
        return self.set(self.delay_ms + self.step_ms)

    @property
    def seconds(self) -> float:
        return self.delay_ms / 1000.0

    def due(self, now: Optional[float] = None) -> bool:
        """Frame-loop hook: True at most once per current delay."""
        now = time.monotonic() if now is None else now
        if self._last_t is None or now - self._last_t >= self.seconds:
            self._last_t = now
            return True
        return False

    def restart(self) -> None:
        self._last_t = None


def play(search, pacer: Pacer, on_event: Optional[Callable[[object], None]] = None,
         sleep: Callable[[float], None] = time.sleep):
    """
    Drive a search to the end, suspending after every Visited/PathCell event.

    The pacer is read again at each suspension, so a delay changed from
    on_event (or another caller) applies from the next pause on. Returns the
    terminal event, or None when the search was cancelled.
    """
    while True:
        ev = search.step()
        if ev is None:
            logger.debug("play stopped with search status %s", search.status)
            return None
        if on_event is not None:
            on_event(ev)
        if not isinstance(ev, (Visited, PathCell)):
            return ev
        sleep(pacer.seconds)
