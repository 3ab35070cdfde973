"""Frame throttle for the classification pipeline.

Limits classification attempts to at most one per interval of wall-clock
time. Frames arriving sooner are dropped silently.
"""

import threading
import time
from typing import Callable, Optional


DEFAULT_THROTTLE_INTERVAL = 0.1  # seconds (~10 fps)


class FrameThrottle:
    """Minimum-spacing gate for incoming frames.

    The first call is always accepted. Every later call is accepted only when
    at least ``interval`` seconds have passed since the last accepted call.

    Attributes:
        interval: Minimum spacing in seconds between accepted calls.
    """

    def __init__(
        self,
        interval: float = DEFAULT_THROTTLE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the throttle.

        Args:
            interval: Minimum spacing in seconds. Zero disables throttling.
            clock: Time source returning seconds; injectable for tests.

        Raises:
            ValueError: If interval is negative.
        """
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")

        self.interval = interval
        self._clock = clock
        self._last_accepted: Optional[float] = None
        self._lock = threading.Lock()

    def should_process(self, now: Optional[float] = None) -> bool:
        """Decide whether a frame arriving at ``now`` should be processed.

        Args:
            now: Arrival time in seconds; defaults to the throttle's clock.

        Returns:
            True if the frame is accepted (and recorded), False if dropped.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            if (self._last_accepted is not None
                    and now - self._last_accepted < self.interval):
                return False
            self._last_accepted = now
            return True

    def reset(self):
        """Forget the last accepted time so the next frame is accepted."""
        with self._lock:
            self._last_accepted = None

    @property
    def last_accepted(self) -> Optional[float]:
        return self._last_accepted
